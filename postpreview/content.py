"""Load posts from JSON files or Markdown files with YAML front matter."""

from __future__ import annotations

import datetime as dt
import json
import re
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import yaml
from pydantic import TypeAdapter, ValidationError

from .errors import ContentError, PostFieldError
from .models import Post, SiteConfig

MARKDOWN_SUFFIXES = (".md", ".markdown")
POST_SUFFIXES = (".json",) + MARKDOWN_SUFFIXES

_FRONT_MATTER = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
_DATED_STEM = re.compile(r"^(?P<date>\d{4}-\d{2}-\d{2})-(?P<slug>.+)$")
_URL_KEYS = ("relativeUrl", "relative_url", "permalink")

_date_adapter: TypeAdapter[Union[dt.date, dt.datetime]] = TypeAdapter(
    Union[dt.date, dt.datetime]
)


def split_front_matter(text: str) -> tuple[dict, str]:
    """Split a Markdown document into its front matter mapping and body."""

    match = _FRONT_MATTER.match(text)
    if not match:
        return {}, text
    data = yaml.safe_load(match.group(1)) or {}
    if not isinstance(data, dict):
        raise ContentError("front matter must be a mapping")
    return data, text[match.end():]


def _read_payload(path: Path) -> dict:
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            payload = json.loads(text)
        else:
            payload, _body = split_front_matter(text)
    except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError, ContentError) as exc:
        raise ContentError(f"Invalid content file {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ContentError(f"Invalid content file {path}: expected an object")
    return payload


def _categories(value: Any, source: Optional[Path] = None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    raise PostFieldError(
        ["categories"], f"expected a string or a list, got {type(value).__name__}",
        source=source,
    )


def derive_relative_url(
    pattern: str,
    *,
    date: Union[dt.date, dt.datetime],
    slug: str,
    categories: Iterable[str] = (),
) -> str:
    """Fill a permalink pattern such as ``/{year}/{month}/{day}/{slug}/``."""

    try:
        url = pattern.format(
            year=f"{date.year:04d}",
            month=f"{date.month:02d}",
            day=f"{date.day:02d}",
            slug=slug,
            categories="/".join(categories),
        )
    except (KeyError, IndexError, ValueError, AttributeError) as exc:
        raise ContentError(f"Invalid permalink {pattern!r}: {exc}") from exc
    return re.sub(r"/{2,}", "/", url)


def load_post(path: Path, config: Optional[SiteConfig] = None) -> Post:
    """Load one post file, filling slug, date and URL from the file name."""

    config = config or SiteConfig()
    payload = _read_payload(path)

    stem_match = _DATED_STEM.match(path.stem)
    slug = payload.get("slug") or (stem_match.group("slug") if stem_match else path.stem)
    raw_date = payload.get("date")
    if raw_date is None and stem_match:
        raw_date = stem_match.group("date")

    categories = _categories(payload.get("categories", payload.get("category")), path)
    fields = {
        "title": payload.get("title"),
        "description": payload.get("description"),
        "slug": str(slug),
        "categories": categories,
    }
    fields = {key: value for key, value in fields.items() if value is not None}

    if raw_date is not None:
        try:
            fields["date"] = _date_adapter.validate_python(raw_date)
        except ValidationError as exc:
            raise PostFieldError(["date"], f"unparseable date {raw_date!r}", source=path) from exc

    url = next((payload[key] for key in _URL_KEYS if payload.get(key)), None)
    if url is None and "date" in fields:
        url = derive_relative_url(
            config.permalink, date=fields["date"], slug=str(slug), categories=categories
        )
    if url is not None:
        fields["relativeUrl"] = url

    return Post.from_payload(fields, source=path)


def post_files(content_dir: Path) -> list[Path]:
    """Return post files in ``content_dir`` in a stable order."""

    if not content_dir.exists():
        raise FileNotFoundError(f"Content directory not found: {content_dir}")

    paths = sorted(
        path
        for path in content_dir.iterdir()
        if path.is_file() and path.suffix in POST_SUFFIXES
    )
    if not paths:
        raise SystemExit(f"No content files found in {content_dir}")
    return paths


def load_posts(content_dir: Path, config: Optional[SiteConfig] = None) -> list[Post]:
    """Load and validate every post in a directory."""

    return [load_post(path, config) for path in post_files(content_dir)]


__all__ = [
    "derive_relative_url",
    "load_post",
    "load_posts",
    "post_files",
    "split_front_matter",
]

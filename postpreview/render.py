"""Render a post as an HTML preview fragment."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined, UndefinedError, select_autoescape

from .errors import PostFieldError
from .models import Post

TEMPLATES_DIR = Path(__file__).parent / "templates"
PREVIEW_TEMPLATE = "post_preview.jinja"

_UNDEFINED_NAME = re.compile(r"attribute '(?P<attr>[^']+)'|'(?P<name>[^']+)' is undefined")

PostLike = Union[Post, Mapping[str, Any]]


def format_post_date(value: Any) -> str:
    """Format a date as "March 05, 2024"."""

    try:
        return f"{value:%B %d}, {value.year:04d}"
    except (AttributeError, TypeError, ValueError) as exc:
        raise PostFieldError(["date"], f"expected a date, got {type(value).__name__}") from exc


@lru_cache(maxsize=None)
def preview_env(escape: bool = True) -> Environment:
    """Return the shared Jinja environment for preview templates."""

    env = Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=select_autoescape(["html", "jinja"]) if escape else False,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )
    env.filters["post_date"] = format_post_date
    return env


def _undefined_field(exc: UndefinedError) -> str:
    match = _UNDEFINED_NAME.search(str(exc))
    if not match:
        return "<unknown>"
    return match.group("attr") or match.group("name")


def render_post_preview(post: PostLike, *, escape: bool = True) -> str:
    """Render ``post`` into an ``<article class="post-preview">`` fragment.

    Mappings are validated into :class:`Post` first. Title, description and
    URL are HTML-escaped unless ``escape`` is false.
    """

    if isinstance(post, Mapping):
        post = Post.from_payload(post)

    template = preview_env(escape).get_template(PREVIEW_TEMPLATE)
    try:
        return template.render(post=post)
    except UndefinedError as exc:
        raise PostFieldError([_undefined_field(exc)], "missing on post") from exc


@dataclass(frozen=True)
class PostPreview:
    """Preview component holding one post."""

    post: Post
    escape: bool = True

    def render(self) -> str:
        return render_post_preview(self.post, escape=self.escape)


__all__ = [
    "PostPreview",
    "format_post_date",
    "preview_env",
    "render_post_preview",
]

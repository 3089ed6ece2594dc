"""Render preview listings for a collection of posts."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from .content import load_post, post_files
from .errors import PreviewError
from .io_utils import write_text
from .models import Post, SiteConfig
from .render import render_post_preview


@dataclass
class PostFailure:
    """A post that could not be loaded or rendered."""

    label: str
    error: Exception

    def __str__(self) -> str:
        return f"{self.label}: {self.error}"


@dataclass
class IndexResult:
    """Outcome of rendering a listing of previews."""

    html: str = ""
    rendered: List[Post] = field(default_factory=list)
    failures: List[PostFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def _label(post: Any, index: int) -> str:
    if isinstance(post, Mapping):
        label = post.get("slug") or post.get("title")
    else:
        label = getattr(post, "slug", None) or getattr(post, "title", None)
    return str(label or f"post #{index}")


def render_index(
    posts: Iterable[Any],
    *,
    escape: bool = True,
    failures: Optional[List[PostFailure]] = None,
) -> IndexResult:
    """Render posts newest first, skipping the ones that fail validation.

    Posts may be :class:`Post` values, mappings or attribute-style objects.
    A failing post is recorded in ``IndexResult.failures`` and does not stop
    the rest of the listing.
    """

    result = IndexResult(failures=list(failures or []))
    valid: list[Post] = []
    for index, post in enumerate(posts, start=1):
        if isinstance(post, Post):
            valid.append(post)
            continue
        try:
            valid.append(Post.from_payload(post))
        except PreviewError as exc:
            result.failures.append(PostFailure(_label(post, index), exc))

    fragments: list[str] = []
    ordered = sorted(valid, key=lambda item: item.sort_key, reverse=True)
    for post in ordered:
        fragments.append(render_post_preview(post, escape=escape))
        result.rendered.append(post)

    result.html = "\n".join(fragments)
    return result


def build_index(config: SiteConfig) -> IndexResult:
    """Load posts from ``config.content_dir`` and write the listing."""

    posts: list[Post] = []
    failures: list[PostFailure] = []
    for path in post_files(config.content_dir):
        try:
            posts.append(load_post(path, config))
        except PreviewError as exc:
            failures.append(PostFailure(str(path), exc))

    result = render_index(posts, escape=config.escape, failures=failures)
    output = Path(config.output)
    write_text(output, result.html + "\n" if result.html else "")
    return result


__all__ = ["IndexResult", "PostFailure", "build_index", "render_index"]

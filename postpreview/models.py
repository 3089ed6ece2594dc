"""Pydantic models for post previews."""

from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import PostFieldError

DEFAULT_PERMALINK = "/{year}/{month}/{day}/{slug}/"


class Post(BaseModel):
    """A single article as supplied by the content loader."""

    relative_url: str = Field(
        ..., alias="relativeUrl", description="Site-relative URL used in the preview link."
    )
    title: str = Field(..., description="Display title.")
    description: str = Field(..., description="Short teaser shown under the date.")
    date: Union[dt.date, dt.datetime] = Field(..., description="Publication date.")
    slug: Optional[str] = Field(None, description="URL slug, usually from the file name.")
    categories: List[str] = Field(
        default_factory=list, description="Categories available to permalink patterns."
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    @classmethod
    def from_payload(cls, payload: Any, *, source: Optional[Path] = None) -> "Post":
        """Validate a mapping or an attribute-style object, naming bad fields."""

        try:
            if isinstance(payload, Mapping):
                return cls.model_validate(dict(payload))
            return cls.model_validate(payload, from_attributes=True)
        except ValidationError as exc:
            raise PostFieldError.from_validation(exc, source=source) from exc

    @property
    def sort_key(self) -> dt.datetime:
        """Naive UTC datetime used to order posts chronologically."""

        if isinstance(self.date, dt.datetime):
            if self.date.tzinfo is not None:
                return self.date.astimezone(dt.timezone.utc).replace(tzinfo=None)
            return self.date
        return dt.datetime.combine(self.date, dt.time())


class SiteConfig(BaseModel):
    """Settings read from postpreview.yaml."""

    content_dir: Path = Field(
        Path("src/_posts"),
        alias="contentDir",
        description="Directory holding post files.",
    )
    output: Path = Field(
        Path("output/index.html"), description="File the preview listing is written to."
    )
    permalink: str = Field(
        DEFAULT_PERMALINK,
        description="Pattern for posts that do not declare a relative URL.",
    )
    escape: bool = Field(
        True, description="HTML-escape post values before interpolation."
    )

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator("permalink")
    @classmethod
    def _check_permalink(cls, value: str) -> str:
        try:
            value.format(year="2000", month="01", day="01", slug="slug", categories="")
        except (KeyError, IndexError, ValueError, AttributeError) as exc:
            raise ValueError(f"invalid permalink pattern {value!r}: {exc}") from exc
        return value


__all__ = ["DEFAULT_PERMALINK", "Post", "SiteConfig"]

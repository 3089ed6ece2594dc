"""Exception types raised by postpreview."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from pydantic import ValidationError


class PreviewError(ValueError):
    """Base class for postpreview errors."""


class PostFieldError(PreviewError):
    """A post record is missing a field or carries an invalid value."""

    def __init__(self, fields: Iterable[str], detail: str = "", *, source: Optional[Path] = None):
        self.fields = tuple(fields)
        self.source = source
        where = f"{source}: " if source else ""
        names = ", ".join(self.fields) or "<unknown>"
        message = f"{where}invalid post field(s): {names}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)

    @classmethod
    def from_validation(
        cls, exc: ValidationError, *, source: Optional[Path] = None
    ) -> "PostFieldError":
        fields: list[str] = []
        details: list[str] = []
        for error in exc.errors():
            name = ".".join(str(part) for part in error["loc"]) or "<root>"
            if name not in fields:
                fields.append(name)
            details.append(f"{name}: {error['msg']}")
        return cls(fields, "; ".join(details), source=source)


class ContentError(PreviewError):
    """A content file could not be read or parsed."""


class ConfigError(PreviewError):
    """The site configuration is invalid."""


__all__ = ["ConfigError", "ContentError", "PostFieldError", "PreviewError"]

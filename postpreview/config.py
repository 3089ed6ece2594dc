"""Site configuration loading."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .errors import ConfigError
from .models import SiteConfig

DEFAULT_CONFIG_NAME = "postpreview.yaml"


def load_site_config(path: Optional[Path] = None) -> SiteConfig:
    """Load ``postpreview.yaml``, falling back to defaults when it is absent.

    An explicitly requested file must exist.
    """

    if path is None:
        path = Path(DEFAULT_CONFIG_NAME)
        if not path.exists():
            return SiteConfig()
    elif not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping of settings.")
    try:
        return SiteConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config in {path}: {exc}") from exc


__all__ = ["DEFAULT_CONFIG_NAME", "load_site_config"]

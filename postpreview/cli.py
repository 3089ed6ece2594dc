"""Command-line interface for postpreview."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable, Optional

from .build import build_index
from .config import load_site_config
from .content import load_post
from .errors import PreviewError
from .io_utils import warn
from .render import render_post_preview


def _handle_render(args: argparse.Namespace) -> None:
    path = Path(args.path)
    if not path.exists():
        raise SystemExit(f"Post file not found: {path}")

    try:
        config = load_site_config(Path(args.config) if args.config else None)
        post = load_post(path, config)
        html = render_post_preview(post, escape=config.escape and not args.no_escape)
    except (PreviewError, FileNotFoundError) as exc:
        raise SystemExit(str(exc)) from exc
    sys.stdout.write(html + "\n")


def _handle_build(args: argparse.Namespace) -> None:
    try:
        config = load_site_config(Path(args.config) if args.config else None)
    except (PreviewError, FileNotFoundError) as exc:
        raise SystemExit(str(exc)) from exc

    overrides: dict = {}
    if args.content:
        overrides["content_dir"] = Path(args.content)
    if args.out:
        overrides["output"] = Path(args.out)
    if args.no_escape:
        overrides["escape"] = False
    if overrides:
        config = config.model_copy(update=overrides)

    try:
        result = build_index(config)
    except (PreviewError, FileNotFoundError) as exc:
        raise SystemExit(str(exc)) from exc
    for failure in result.failures:
        warn(f"Skipped {failure}")

    print(f"Built {len(result.rendered)} preview(s) into {config.output}.")
    if not result.ok:
        raise SystemExit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="postpreview",
        description="Render post preview fragments for a static site",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="postpreview 0.1.0",
        help="Show the postpreview version and exit.",
    )

    subparsers = parser.add_subparsers(dest="command")

    render_parser = subparsers.add_parser(
        "render", help="Print the preview fragment for a single post file."
    )
    render_parser.add_argument("path", help="Post file (.json, .md or .markdown).")
    render_parser.add_argument(
        "--config",
        default=None,
        help="Path to postpreview.yaml (defaults to ./postpreview.yaml if present).",
    )
    render_parser.add_argument(
        "--no-escape",
        action="store_true",
        help="Interpolate post values without HTML escaping.",
    )
    render_parser.set_defaults(func=_handle_render)

    build_parser = subparsers.add_parser(
        "build", help="Render previews for every post into one listing fragment."
    )
    build_parser.add_argument(
        "--config",
        default=None,
        help="Path to postpreview.yaml (defaults to ./postpreview.yaml if present).",
    )
    build_parser.add_argument(
        "--content",
        default=None,
        help="Directory containing post files (overrides content_dir).",
    )
    build_parser.add_argument(
        "--out",
        default=None,
        help="File to write the listing to (overrides output).",
    )
    build_parser.add_argument(
        "--no-escape",
        action="store_true",
        help="Interpolate post values without HTML escaping.",
    )
    build_parser.set_defaults(func=_handle_build)

    return parser


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


__all__ = ["build_parser", "main"]


if __name__ == "__main__":
    main()

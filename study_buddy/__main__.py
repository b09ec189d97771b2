"""CLI entrypoint for study-buddy."""

from __future__ import annotations

import argparse
from importlib import metadata
from pathlib import Path
from typing import Any, Sequence

from .app import StudyBuddyApp
from .config import ensure_config_dir, load_config


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="study-buddy", description="Chat with the Study Buddy assistant"
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "--base-url",
        help="Override backend.base_url (for example http://localhost:3001)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to an alternate config.toml",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Load configuration, handle CLI flags, and run the TUI."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("study-buddy")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"study-buddy {version}")
        return

    overrides: dict[str, Any] = {}
    if args.base_url:
        overrides["backend"] = {"base_url": args.base_url}

    if args.config is None:
        ensure_config_dir()
    config = load_config(config_path=args.config, overrides=overrides or None)

    StudyBuddyApp(config=config).run()


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""Offline reconciliation preview.

This demonstrates using the flowzonify components directly:

* load the packaged (or a custom) flowzone template
* reconcile it against a local workflow file, if one exists
* print the resulting YAML without touching git or GitHub

Visibility is passed as a flag rather than probed over the network.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from flowzonify.logging import configure_logging
from flowzonify.reconcile import MissingKeyError, reconcile
from flowzonify.template import load_template


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Preview a flowzone.yml reconciliation.")
    parser.add_argument(
        "target",
        type=Path,
        help="Path to an existing .github/workflows/flowzone.yml (need not exist)",
    )
    parser.add_argument("--template", type=Path, default=None, help="Custom template path")
    parser.add_argument("--private", action="store_true", help="Treat the repository as private")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level)

    template = load_template(args.template)
    existing = args.target.read_text(encoding="utf-8") if args.target.exists() else None
    try:
        result = reconcile(template, existing, is_public=not args.private)
    except MissingKeyError as e:
        print(f"Cannot update {args.target}: {e}")
        return 1

    print(f"# {result.action} ({'changed' if result.changed else 'unchanged'})")
    print(result.text, end="")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

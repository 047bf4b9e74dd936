"""CLI entrypoint for flowzonify."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from flowzonify import __version__
from flowzonify.config import FlowzonifySettings
from flowzonify.logging import configure_logging
from flowzonify.orchestrator import Orchestrator
from flowzonify.template import load_template

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flowzonify",
        description="Add or update the Flowzone workflow in every repository listed in REPOS",
    )
    parser.add_argument("--version", action="version", version=f"flowzonify {__version__}")
    parser.add_argument(
        "--template",
        type=Path,
        default=None,
        help="Path to a flowzone.yml template (defaults to the packaged one)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = FlowzonifySettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment or .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    orchestrator: Orchestrator | None = None
    try:
        template = load_template(args.template)
        orchestrator = Orchestrator.from_settings(settings, template)
        outcomes = orchestrator.run(settings.repos)
        for outcome in outcomes:
            pr = outcome.pull_request
            if pr is not None:
                print(f"Created pull request for '{outcome.repository}': {pr.url}")
            else:
                print(f"No changes detected for '{outcome.repository}', skipped")
        return 0
    except Exception:
        logger.exception("Run aborted")
        return 1
    finally:
        if orchestrator is not None:
            orchestrator.close()


if __name__ == "__main__":
    raise SystemExit(main())

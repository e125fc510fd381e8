"""CLI entrypoints for changebot."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .bootstrap import build_orchestrator
from .config import load_config
from .errors import ConfigurationError
from .logging import configure_logging


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="changebot",
        description="Turn natural-language change requests into GitHub pull requests.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .changebot.yml or its directory (defaults to $CHANGEBOT_CONFIG or cwd).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the slash-command webhook service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="0.0.0.0", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to listen on.")

    run_parser = subparsers.add_parser(
        "run",
        help="Process a single change request synchronously.",
    )
    _add_verbose_option(run_parser, suppress_default=True)
    run_parser.add_argument(
        "text",
        nargs="+",
        help='Command text, for example: add a health route --repo=owner/name',
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for changebot commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(args.config)
    except ConfigurationError as exc:
        parser.exit(1, f"changebot: {exc}\n")

    if args.command == "serve":
        _serve(parser, config, args.host, args.port)
    elif args.command == "run":
        try:
            orchestrator = build_orchestrator(config)
        except ConfigurationError as exc:
            parser.exit(1, f"changebot: {exc}\n")
        ack = orchestrator.acknowledge(" ".join(args.text))
        if ack.command is None:
            parser.exit(1, f"{ack.message}\n")
        print(ack.message)
        outcome = orchestrator.handle(ack.command)
        if outcome.status != "ok":
            parser.exit(1, f"{outcome.message}\nRun with --verbose for more details.\n")
        print(outcome.pull_request_url)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _serve(parser: argparse.ArgumentParser, config, host: str, port: int) -> None:
    from .service.app import run_service

    try:
        run_service(config, host=host, port=port)
    except ConfigurationError as exc:
        parser.exit(1, f"changebot: {exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])

"""CLI entrypoints for godox commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, GodoxConfig
from .errors import GodoxError
from .logging import configure_logging
from .orchestrator import Orchestrator, with_overrides
from .serializer import to_json, to_text


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


def _add_source_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Root of the Go source tree (defaults to current directory).",
    )
    parser.add_argument(
        "--all",
        dest="include_unexported",
        action="store_true",
        help="Document unexported declarations too.",
    )
    parser.add_argument(
        "--no-merge",
        action="store_true",
        help="Keep same-named packages from different directories apart.",
    )
    parser.add_argument(
        "--no-recursive",
        action="store_true",
        help="Only read the root directory.",
    )
    parser.add_argument(
        "--skip-unsupported",
        action="store_true",
        help="Drop declarations with unsupported type syntax instead of failing.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="godox",
        description="Extract a documentation model from Go source trees.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    json_parser = subparsers.add_parser("json", help="Print the documentation model as JSON.")
    _add_verbose_option(json_parser, suppress_default=True)
    _add_source_options(json_parser)

    text_parser = subparsers.add_parser("text", help="Print a plain-text index per file.")
    _add_verbose_option(text_parser, suppress_default=True)
    _add_source_options(text_parser)

    serve_parser = subparsers.add_parser("serve", help="Serve the documentation over HTTP.")
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_source_options(serve_parser)
    serve_parser.add_argument("--host", default=None, help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to listen on.")
    serve_parser.add_argument(
        "--template",
        type=Path,
        default=None,
        help="Jinja2 template for the HTML page.",
    )

    return parser


def _effective_config(orchestrator: Orchestrator, args: argparse.Namespace) -> GodoxConfig:
    config = orchestrator.load_config(args.path)
    return with_overrides(
        config,
        exported_only=False if args.include_unexported else None,
        merge_packages=False if args.no_merge else None,
        recursive=False if args.no_recursive else None,
        on_unsupported="skip" if args.skip_unsupported else None,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for godox commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    orchestrator = Orchestrator()

    try:
        config = _effective_config(orchestrator, args)
        documentation = orchestrator.build(args.path, config=config)
    except (GodoxError, ConfigError) as exc:
        parser.exit(1, f"godox: {exc}\n")

    if args.command == "json":
        print(to_json(documentation))
    elif args.command == "text":
        print(to_text(documentation), end="")
    elif args.command == "serve":
        from .service import run_service

        template = args.template or config.serve.template
        try:
            run_service(
                documentation,
                host=args.host or config.serve.host,
                port=args.port if args.port is not None else config.serve.port,
                template_path=template,
            )
        except FileNotFoundError as exc:
            parser.exit(1, f"godox: {exc}\n")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])

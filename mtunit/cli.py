"""CLI entrypoints for mtunit commands."""

from __future__ import annotations

import argparse
import sys
import threading
from pathlib import Path

from .compiler import SuiteCompiler
from .errors import MTUnitError
from .linker import link_expert
from .logfile import colorize_log
from .logging import configure_logging, get_logger
from .watcher import WatchLoop


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_root_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--root",
        default=argparse.SUPPRESS if suppress_default else ".",
        help="MQL5 project root holding Test/, Include/ and Runners/ (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mtunit",
        description="Automate MQL5 unit testing: compile test suites, link experts and colour logs.",
    )
    _add_verbose_option(parser)
    _add_root_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write diagnostics to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compile_parser = subparsers.add_parser(
        "compile",
        help="Scan the Test folder once and write MTUnitAllTests.mqh.",
    )
    watch_parser = subparsers.add_parser(
        "watch",
        help="Regenerate MTUnitAllTests.mqh whenever the Test folder changes.",
    )
    link_parser = subparsers.add_parser(
        "link",
        help="Point Runners/autoRunTest.ini at a compiled expert advisor.",
    )
    link_parser.add_argument(
        "expert_path",
        help="Path to the expert's .mq5 source file.",
    )
    log_parser = subparsers.add_parser(
        "log",
        help="Copy today's terminal log into Runners/logFile.log with colours.",
    )
    serve_parser = subparsers.add_parser(
        "serve",
        help="Expose the tools over HTTP.",
    )
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    for subparser in (compile_parser, watch_parser, link_parser, log_parser, serve_parser):
        _add_verbose_option(subparser, suppress_default=True)
        _add_root_option(subparser, suppress_default=True)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for mtunit commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    logger = get_logger("cli")
    root = Path(args.root)

    try:
        if args.command == "compile":
            result = SuiteCompiler().run(root)
            print(f"{result.output_path.name} written to {_relativize(result.output_path)}")
        elif args.command == "watch":
            _watch(root)
        elif args.command == "link":
            ini_path = link_expert(root, args.expert_path)
            print(f"{ini_path.name} configured at {_relativize(ini_path)}")
        elif args.command == "log":
            log_path = colorize_log(root)
            print(f"{log_path.name} generated at {_relativize(log_path)}")
        elif args.command == "serve":
            from .service import run_service

            run_service(host=args.host, port=args.port)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except MTUnitError as exc:
        logger.debug("%s failed", args.command, exc_info=True)
        parser.exit(1, f"mtunit {args.command} failed: {exc}\n")


def _watch(root: Path) -> None:
    loop = WatchLoop(root)
    try:
        # run() stops the observer on the way out, Ctrl-C included.
        loop.run(threading.Event())
    except KeyboardInterrupt:
        print("Stopped watching")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])

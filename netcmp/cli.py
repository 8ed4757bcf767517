from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .classify import classify
from .coloring import danger, muted, set_color_override
from .config import OUTPUT_FORMATS, NetcmpSettings, find_config, load_config, settings_from_config
from .errors import ConfigError, NetcmpError
from .reporting import render_anomaly_warning, render_debug_dumps, render_json, render_report
from .table import ComparisonState


EXIT_FAILURE = 1


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid count: {value!r}") from exc
    if number < 0:
        raise argparse.ArgumentTypeError(f"count must not be negative: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="netcmp",
        usage="%(prog)s [-d] [options] FILE1 FILE2 [FILE ...]",
        description=(
            "Compare TCP connections reported by netstat on several hosts and list\n"
            "connections abandoned by one side but not the other.\n\n"
            'Each FILE holds the output of "netstat -n -f inet -P tcp" from one host.'
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="netstat listings, one per host (at least two).",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        default=None,
        help="Dump anomalous and external connections to stderr.",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Read settings from this TOML file instead of the default locations.",
    )
    parser.add_argument(
        "--output",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Report format on stdout (default: text).",
    )
    parser.add_argument(
        "--external-limit",
        type=_non_negative_int,
        default=None,
        metavar="N",
        help="With -d, dump at most N external connections (0 = all).",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable ANSI colors.",
    )
    parser.add_argument(
        "--no-status",
        action="store_true",
        help="Disable the per-file progress bar.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _merge_settings(args: argparse.Namespace, settings: NetcmpSettings) -> NetcmpSettings:
    return NetcmpSettings(
        debug=settings.debug if args.debug is None else args.debug,
        color=False if args.no_color else settings.color,
        status=settings.status and not args.no_status,
        external_limit=settings.external_limit if args.external_limit is None else args.external_limit,
        output=args.output or settings.output,
        source=settings.source,
    )


def _fail(message: str) -> int:
    print(danger(f"netcmp: {message}", stream=sys.stderr), file=sys.stderr)
    return EXIT_FAILURE


def _compare_paths(paths: list[Path], settings: NetcmpSettings) -> int:
    state = ComparisonState()
    for path in paths:
        print(f"processing file {path}", file=sys.stderr)
        try:
            state.ingest_file(path, show_status=settings.status)
        except NetcmpError as exc:
            return _fail(str(exc))
        except OSError as exc:
            return _fail(f"{path}: {exc.strerror or exc}")

    report = classify(state)

    if settings.debug:
        dumps = render_debug_dumps(report, state.sources, external_limit=settings.external_limit)
        if dumps:
            print(dumps, file=sys.stderr)
    warning = render_anomaly_warning(report, state.sources)
    if warning:
        print(warning, file=sys.stderr)

    if settings.output == "json":
        print(render_json(report, state))
    else:
        print(render_report(report))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if len(args.files) < 2:
        parser.error("need two filenames")

    try:
        loaded = load_config(find_config(args.config))
        settings = _merge_settings(args, settings_from_config(loaded))
    except ConfigError as exc:
        return _fail(str(exc))

    if settings.color is not None:
        set_color_override(settings.color)
    try:
        if settings.debug and settings.source is not None:
            print(muted(f"using config {settings.source}", stream=sys.stderr), file=sys.stderr)
        return _compare_paths([Path(name) for name in args.files], settings)
    finally:
        set_color_override(None)


if __name__ == "__main__":
    raise SystemExit(main())

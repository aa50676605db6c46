import argparse
import logging
import os
import sys

from svreg.analyzer import RegisterAnalyzer
from svreg.config import load_config
from svreg.errors import ConfigError, SvregError
from svreg.renderers import renderer_registry
from svreg.sources import tree_source_registry

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(args: argparse.Namespace, config_level=None) -> None:
    """Set the root log level from the command line or configuration."""
    if getattr(args, "verbose", False):
        level = logging.DEBUG
    elif getattr(args, "quiet", False):
        level = logging.ERROR
    else:
        level = getattr(logging, (config_level or "WARNING").upper(), logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def cmd_analyze(args: argparse.Namespace) -> int:
    """Analyse registers in a file or directory and print a report.

    The tree source is selected with ``--source`` and the output format
    with the global ``--format`` option; both use registries for
    extensibility.
    """
    if not os.path.exists(args.path):
        sys.exit(f"Error: Path not found: {args.path}")

    if os.path.isdir(args.path) and not args.recursive:
        sys.exit(f"Error: {args.path} is a directory. Use --recursive to analyse it.")

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        sys.exit(f"Error: {exc}")
    configure_logging(args, config.log_level)

    if args.no_cache:
        config.cache_enabled = False

    analyzer = RegisterAnalyzer(config=config, source_name=args.source)
    result = analyzer.analyze_path(
        args.path,
        recursive=args.recursive,
        pattern=args.pattern,
        module=args.module,
        jobs=args.jobs,
    )

    for failure in result.failures:
        print(f"Warning: {failure.file}: {failure.reason}", file=sys.stderr)

    renderer = renderer_registry.create(args.format)
    print(renderer.render_report(
        result,
        include_registers=args.type in ("registers", "all"),
        include_modules=args.type in ("modules", "all"),
    ))

    # Nothing to report because of failures; partial results still exit 0
    if result.failures and not result.modules:
        return 1
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    """Print the version of the selected tree source."""
    try:
        config = load_config(args.config)
    except ConfigError as exc:
        sys.exit(f"Error: {exc}")
    configure_logging(args, config.log_level)

    source = tree_source_registry.create(args.source, config=config)
    try:
        print(f"{source.name} {source.version()}")
    except SvregError as exc:
        sys.exit(f"Error: {exc}")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="regscan.py",
        description="Register inventory for Verilog/SystemVerilog designs.",
    )

    # Global options
    parser.add_argument(
        "--format",
        choices=renderer_registry.keys(),
        default="markdown",
        help="Output format (default: markdown).",
    )
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="YAML configuration file (default: ./.svreg.yaml or ~/.svreg.yaml).",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors.")

    subparsers = parser.add_subparsers(dest="command")

    # analyze subcommand
    analyze = subparsers.add_parser(
        "analyze",
        help="Find flip-flops and latches and count their bits.",
    )
    analyze.add_argument(
        "path",
        metavar="PATH",
        help="Verilog/SystemVerilog file, or directory with --recursive.",
    )
    analyze.add_argument(
        "-r", "--recursive",
        action="store_true",
        help="Analyse every source file below PATH.",
    )
    analyze.add_argument(
        "--pattern",
        help="Glob restricting which file names are analysed (e.g. '*_reg.sv').",
    )
    analyze.add_argument(
        "--module",
        help="Only report this module.",
    )
    analyze.add_argument(
        "--type",
        choices=["registers", "modules", "all"],
        default="all",
        help="Sections to report (default: all).",
    )
    analyze.add_argument(
        "--source",
        choices=tree_source_registry.keys(),
        default="verible",
        help="Tree source (default: verible).",
    )
    analyze.add_argument(
        "-j", "--jobs",
        type=int,
        default=None,
        help="Number of files parsed concurrently (default: from config, 1).",
    )
    analyze.add_argument(
        "--no-cache",
        action="store_true",
        help="Do not reuse results of unchanged files.",
    )
    analyze.set_defaults(func=cmd_analyze)

    # version subcommand
    version = subparsers.add_parser(
        "version",
        help="Show the version of the tree source.",
    )
    version.add_argument(
        "--source",
        choices=tree_source_registry.keys(),
        default="verible",
        help="Tree source (default: verible).",
    )
    version.set_defaults(func=cmd_version)

    return parser


def main(argv=None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())

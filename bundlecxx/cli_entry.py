"""
Command-line interface for bundle-cxx

Two workflows:

    bundle-cxx list-symbols <source-file> [-c symbols.csv] [args...]
    bundle-cxx bundle <source-file> [-c symbols.csv] [-o output] [args...]

Arguments the CLI does not recognize are forwarded verbatim, in order, to the
symbol parser (list-symbols) or to the amalgamate tool (bundle).
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence, TextIO

# Add project root to sys.path when running as script
if __name__ == "__main__":
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from bundlecxx import __version__
from bundlecxx.api import BundleCxx
from bundlecxx.config import BundleConfig, load_config
from bundlecxx.cli.rich_output import set_rich_enabled
from bundlecxx.cli.commands import (
    cmd_bundle,
    cmd_config,
    cmd_list_symbols,
    cmd_status,
)

# Commands whose unrecognized arguments are forwarded to an external tool.
TOOL_COMMANDS = ("list-symbols", "bundle")

EXAMPLES = """\
Example:
  # Generate a Symbols CSV file from a source file.
  $ bundle-cxx list-symbols mysource.cxx --csv mysource_symbols.csv -DMYSOURCE_IMPLEMENTATION

  # Now edit `mysource_symbols.csv` to rename symbols as needed.
  # The `filename_line` in the CSV indicates where each symbol is defined.
  # The `kind_display_name` is the original symbol kind and name.
  # The `new_display_name` is where you can specify the new name for the symbol.

  # Finally, bundle the source file using the edited Symbols CSV file.
  $ bundle-cxx bundle mysource.cxx -c mysource_symbols.csv -o mysource_bundled.cxx

Arguments after "--" are forwarded untouched. Use it for tool arguments that
start like a bundle-cxx option, e.g. `-cfoo`, which would otherwise be read
as `--csv foo`:
  $ bundle-cxx bundle mysource.cxx -c mysource_symbols.csv -- -cfoo
"""


# =============================================================================

def _is_machine_readable(args: Any) -> bool:
    return bool(getattr(args, "machine_readable", False))


def _json_stdout(args: Any) -> TextIO:
    """
    When --machine-readable is enabled, main() redirects sys.stdout -> sys.stderr
    to prevent accidental non-JSON output. This function returns the original stdout.
    """
    return getattr(args, "_json_stdout", sys.stdout)


def _print_json_to_stdout(args: Any, payload: Any) -> None:
    """
    Always print JSON to the original stdout in machine-readable mode.
    """
    s = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    print(s, file=_json_stdout(args))


def _maybe_print_output(args: Any, output_text_or_json: str) -> None:
    """
    Print final command output:
    - in normal mode: print to sys.stdout
    - in machine-readable mode: print to original stdout (args._json_stdout)
    """
    if _is_machine_readable(args):
        print(output_text_or_json, file=_json_stdout(args))
    else:
        print(output_text_or_json)


def _ordered_tool_args(
    argv: Sequence[str], positional: Sequence[str], unknown: Sequence[str]
) -> List[str]:
    """Merge forwarded positionals and unrecognized options back into argv order."""
    pending_pos = list(positional)
    pending_unknown = list(unknown)
    ordered: List[str] = []
    for token in argv:
        if pending_unknown and token == pending_unknown[0]:
            ordered.append(pending_unknown.pop(0))
        elif pending_pos and token == pending_pos[0]:
            ordered.append(pending_pos.pop(0))
    return ordered + pending_unknown + pending_pos


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="bundle-cxx",
        description="Rename C/C++ symbols to avoid collisions, then amalgamate source files.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Global options
    parser.add_argument("--config", type=str, help="Path to configuration file")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output and debug logging",
    )
    parser.add_argument(
        "--no-rich",
        action="store_true",
        help="Disable rich terminal output (use plain text)",
    )
    parser.add_argument(
        "--machine-readable",
        action="store_true",
        help="Output in machine-readable format (JSON)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list-symbols command
    list_parser = subparsers.add_parser(
        "list-symbols",
        help="Generate a Symbols CSV file from the source file",
        allow_abbrev=False,
    )
    list_parser.add_argument("source", nargs="?", help="C/C++ source file to parse")
    list_parser.add_argument(
        "-c", "--csv", help="Symbols CSV file path (default: <source-stem>_symbols.csv)"
    )
    list_parser.add_argument(
        "tool_args", nargs="*", help="Additional arguments for libclang (e.g. -DFOO)"
    )

    # bundle command
    bundle_parser = subparsers.add_parser(
        "bundle",
        help="Bundle the source file by renaming symbols and amalgamating",
        allow_abbrev=False,
    )
    bundle_parser.add_argument("source", nargs="?", help="C/C++ source file to bundle")
    bundle_parser.add_argument("-c", "--csv", help="Symbols CSV file path")
    bundle_parser.add_argument(
        "-o", "--output", help="Output file path (default: <source-stem>_bundled<ext>)"
    )
    bundle_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show planned renames without modifying files or running amalgamate",
    )
    bundle_parser.add_argument(
        "tool_args", nargs="*", help="Additional arguments for amalgamate"
    )

    # status command
    status_parser = subparsers.add_parser("status", help="Show external tool availability")
    status_parser.add_argument(
        "--format", choices=["text", "json"], default="text", help="Output format"
    )

    # config command
    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_subparsers = config_parser.add_subparsers(
        dest="config_action", help="Configuration actions"
    )
    config_subparsers.add_parser("show", help="Show current configuration")
    init_parser = config_subparsers.add_parser("init", help="Create a default configuration file")
    init_parser.add_argument(
        "--path", default="bundlecxx.json", help="Configuration file path"
    )
    init_parser.add_argument(
        "--format", choices=["json", "yaml"], default="json", help="Configuration file format"
    )
    validate_parser = config_subparsers.add_parser(
        "validate", help="Validate a configuration file"
    )
    validate_parser.add_argument("config_file", help="Configuration file to validate")

    return parser


def _create_bundler(config: BundleConfig) -> BundleCxx:
    return BundleCxx(config)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    argv = list(sys.argv[1:] if argv is None else argv)
    forwarded: List[str] = []
    if "--" in argv:
        split = argv.index("--")
        argv, forwarded = argv[:split], argv[split + 1 :]
    args, unknown = parser.parse_known_args(argv)

    if not args.command:
        parser.print_help()
        return

    if args.command in TOOL_COMMANDS:
        args.tool_args = _ordered_tool_args(argv, args.tool_args, unknown) + forwarded
    elif unknown or forwarded:
        parser.error(f"unrecognized arguments: {' '.join(unknown + forwarded)}")

    if args.command == "config" and not args.config_action:
        parser.parse_args([args.command, "--help"])

    # If machine-readable: keep stdout JSON-only by redirecting it to stderr and
    # printing JSON explicitly to args._json_stdout.
    if _is_machine_readable(args):
        args._json_stdout = sys.stdout
        sys.stdout = sys.stderr

    try:
        setup_logging(getattr(args, "verbose", False))

        use_rich = not getattr(args, "no_rich", False) and not _is_machine_readable(args)
        set_rich_enabled(use_rich)

        if args.command == "config":
            cmd_config(args)
            return

        if args.command in TOOL_COMMANDS and not args.source:
            print("Error: Source file path is required.", file=sys.stderr)
            sys.exit(1)

        config = load_config(getattr(args, "config", None))
        bundler = _create_bundler(config)

        if args.command == "list-symbols":
            cmd_list_symbols(args, bundler)
        elif args.command == "bundle":
            cmd_bundle(args, bundler)
        elif args.command == "status":
            cmd_status(args, bundler)

    except KeyboardInterrupt:
        if _is_machine_readable(args):
            _print_json_to_stdout(args, {"success": False, "error": "cancelled_by_user"})
        print("\nOperation cancelled by user", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        if _is_machine_readable(args):
            _print_json_to_stdout(
                args,
                {"success": False, "error": str(e), "command": getattr(args, "command", None)},
            )
        print(f"Error: {e}", file=sys.stderr)
        if getattr(args, "verbose", False):
            import traceback

            traceback.print_exc()
        sys.exit(1)
    finally:
        if _is_machine_readable(args):
            sys.stdout = args._json_stdout


if __name__ == "__main__":
    main()

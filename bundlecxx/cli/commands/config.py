"""
Configuration and status commands for the bundle-cxx CLI.

This module contains command handlers for:
- Configuration management (show, init, validate)
- Tool availability reporting
"""

import json
import sys

from bundlecxx.api import BundleCxx
from bundlecxx.cli.rich_output import get_rich_output
from bundlecxx.config import BundleConfig, ConfigurationError


def cmd_status(args, bundler: BundleCxx) -> None:
    """Handle status command."""
    from bundlecxx.cli_entry import _is_machine_readable, _print_json_to_stdout

    missing_listing = bundler.check_tools("list-symbols")
    missing_bundle = bundler.check_tools("bundle")
    status = {
        "symbol_source": bundler.config.tools_settings.symbol_source.value,
        "tools": {
            "list-symbols": not missing_listing,
            "bundle": not missing_bundle,
        },
        "missing": missing_listing + missing_bundle,
        "configuration": bundler.config.to_dict(),
    }

    if _is_machine_readable(args) or getattr(args, "format", "text") == "json":
        _print_json_to_stdout(args, status)
        return

    out = get_rich_output()
    out.print_rows(
        "bundle-cxx Tool Status",
        ["Command", "Ready"],
        ((name, "yes" if ready else "no") for name, ready in status["tools"].items()),
    )
    for name in status["missing"]:
        out.print_warning(f'Required tool, "{name}", is not present.')


def cmd_config(args) -> None:
    """Handle config command."""
    out = get_rich_output()

    if args.config_action == "show":
        config = BundleConfig.load(getattr(args, "config", None))
        out.print_header("Current bundle-cxx Configuration", getattr(args, "config", None))
        print(config.get_config_summary())

    elif args.config_action == "init":
        config = BundleConfig.default()
        try:
            config.to_file(args.path, args.format)
        except ConfigurationError as e:
            print(f"Error: Failed to create configuration: {e}", file=sys.stderr)
            sys.exit(1)
        out.print_success(f"Default configuration file created at {args.path}")
        print("Edit the file to customize your bundle-cxx settings.")

    elif args.config_action == "validate":
        try:
            config = BundleConfig.load(args.config_file, use_env=False, validate=True)
        except ConfigurationError as e:
            print(f"Error: Configuration file is invalid: {e}", file=sys.stderr)
            sys.exit(1)
        out.print_success(f"Configuration file {args.config_file} is valid")
        if getattr(args, "verbose", False):
            print(json.dumps(config.to_dict(), indent=2))

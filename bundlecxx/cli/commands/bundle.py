"""
Bundle command for the bundle-cxx CLI.

Renames symbols from an edited symbols table, amalgamates the source file and
restores the originals.
"""

import json
import sys
from typing import Any, Dict

from bundlecxx.api import BundleCxx, BundleResult
from bundlecxx.cli.rich_output import get_rich_output


def bundle_result_to_dict(result: BundleResult) -> Dict[str, Any]:
    return {
        "success": result.success,
        "dry_run": result.dry_run,
        "output_path": result.output_path,
        "renames": result.renames,
        "restored_files": result.restored_files,
        "errors": result.errors,
        "warnings": result.warnings,
        "metadata": result.metadata,
    }


def format_bundle_result(
    result: BundleResult, format_type: str, include_warnings: bool = True
) -> str:
    """Format bundle result for output."""
    if format_type == "json":
        return json.dumps(bundle_result_to_dict(result), indent=2)

    output = []
    if not result.success:
        output.append("Bundle failed")
        for error in result.errors:
            output.append(f"Error: {error}")
    elif result.dry_run:
        planned = result.metadata.get("planned", {})
        output.append(f"Dry run: {len(planned)} file(s) would be renamed")
        for filename, renames in planned.items():
            output.append(f"  {filename}")
            for rename in renames:
                output.append(f"    {rename['symbol']} -> {rename['new_name']}")
    else:
        output.append(f"Bundled source written to {result.output_path}")
        total = sum(sum(counts.values()) for counts in result.renames.values())
        output.append(f"Files renamed: {result.files_renamed} ({total} replacements)")
        output.append(f"Files restored: {len(result.restored_files)}")

    if include_warnings and result.warnings:
        output.append("\nWarnings:")
        for warning in result.warnings:
            output.append(f"  {warning}")

    return "\n".join(output)


def cmd_bundle(args, bundler: BundleCxx) -> None:
    """Handle bundle command."""
    from bundlecxx.cli_entry import _is_machine_readable, _maybe_print_output

    result = bundler.bundle(
        args.source,
        symbols_path=args.csv,
        output_path=args.output,
        args=args.tool_args,
        dry_run=args.dry_run,
    )

    if _is_machine_readable(args):
        _maybe_print_output(args, format_bundle_result(result, "json"))
        if not result.success:
            sys.exit(1)
        return

    out = get_rich_output()
    if not result.success:
        for error in result.errors:
            out.print_error(error)
        for warning in result.warnings:
            out.print_warning(warning)
        sys.exit(1)

    if result.renames:
        out.print_rows(
            "Renamed symbols",
            ["File", "Symbol", "Replacements"],
            (
                (filename, name, count)
                for filename, counts in result.renames.items()
                for name, count in counts.items()
            ),
        )
    for warning in result.warnings:
        out.print_warning(warning)
    out.print_success(format_bundle_result(result, "text", include_warnings=False))

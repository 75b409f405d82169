"""
Symbol listing command for the bundle-cxx CLI.

Generates the editable symbols table for a source file.
"""

import json
import sys
from typing import Any, Dict

from bundlecxx.api import BundleCxx, SymbolListingResult
from bundlecxx.cli.rich_output import get_rich_output
from bundlecxx.symbols import group_symbols_by_file

PREVIEW_ROWS = 20


def listing_result_to_dict(result: SymbolListingResult) -> Dict[str, Any]:
    return {
        "success": result.success,
        "symbols_path": result.symbols_path,
        "symbol_count": len(result.symbols),
        "files": sorted(group_symbols_by_file(result.symbols).keys()),
        "errors": result.errors,
        "warnings": result.warnings,
        "metadata": result.metadata,
    }


def format_listing_result(result: SymbolListingResult, format_type: str) -> str:
    """Format a symbol listing result for output."""
    if format_type == "json":
        return json.dumps(listing_result_to_dict(result), indent=2)

    output = []
    if result.success:
        files = group_symbols_by_file(result.symbols)
        output.append(f"Symbols written to {result.symbols_path}")
        output.append(f"Symbols listed: {len(result.symbols)} in {len(files)} file(s)")
    else:
        output.append("Listing symbols failed")
        for error in result.errors:
            output.append(f"Error: {error}")
    return "\n".join(output)


def cmd_list_symbols(args, bundler: BundleCxx) -> None:
    """Handle list-symbols command."""
    from bundlecxx.cli_entry import _is_machine_readable, _maybe_print_output

    result = bundler.list_symbols(args.source, args.csv, args.tool_args)

    if _is_machine_readable(args):
        _maybe_print_output(args, format_listing_result(result, "json"))
        if not result.success:
            sys.exit(1)
        return

    out = get_rich_output()
    if not result.success:
        for error in result.errors:
            out.print_error(error)
        sys.exit(1)

    out.print_rows(
        f"Symbols in {args.source}",
        ["filename_line", "kind_display_name"],
        ((s.filename_line, s.kind_display_name) for s in result.symbols[:PREVIEW_ROWS]),
    )
    if len(result.symbols) > PREVIEW_ROWS:
        out.print_info(f"... and {len(result.symbols) - PREVIEW_ROWS} more")
    out.print_success(format_listing_result(result, "text"))
    out.print_info(
        f"Edit the new_display_name column of {result.symbols_path}, then run "
        f"bundle {args.source} -c {result.symbols_path}"
    )

"""
CLI command handlers.

Organized by functional domain:
- symbols.py: list-symbols command
- bundle.py: bundle command
- config.py: configuration and tool status commands
"""

from .symbols import (
    cmd_list_symbols,
    format_listing_result,
)

from .bundle import (
    cmd_bundle,
    format_bundle_result,
)

from .config import (
    cmd_config,
    cmd_status,
)

__all__ = [
    "cmd_list_symbols",
    "format_listing_result",
    "cmd_bundle",
    "format_bundle_result",
    "cmd_config",
    "cmd_status",
]

"""
bundle-cxx - Symbol renaming and amalgamation of C/C++ sources

Lists the top-level declarations of a C/C++ translation unit into an editable
CSV table, then applies the renames from that table across the referenced
files, runs an amalgamation tool, and restores the original files.
"""

__version__ = "0.1.0"


def __getattr__(name):
    """Lazy loading of main API classes to keep CLI start-up light."""
    if name in {"BundleCxx", "BundleResult", "SymbolListingResult"}:
        from .api import BundleCxx, BundleResult, SymbolListingResult
        return {
            "BundleCxx": BundleCxx,
            "BundleResult": BundleResult,
            "SymbolListingResult": SymbolListingResult,
        }[name]

    if name in {"BundleConfig", "RestorePolicy"}:
        from .config import BundleConfig, RestorePolicy
        return {
            "BundleConfig": BundleConfig,
            "RestorePolicy": RestorePolicy,
        }[name]

    if name == "SymbolEntry":
        from .symbols import SymbolEntry
        return SymbolEntry

    raise AttributeError(f"module 'bundlecxx' has no attribute '{name}'")


__all__ = [
    "__version__",
    # Main API
    "BundleCxx",
    "BundleResult",
    "SymbolListingResult",
    "BundleConfig",
    "RestorePolicy",
    "SymbolEntry",
]

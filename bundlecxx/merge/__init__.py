"""
File mergers used for the amalgamation step.
"""

from .amalgamate import AmalgamateMerger

__all__ = ["AmalgamateMerger"]

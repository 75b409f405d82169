"""
Command-line interface package for bundle-cxx.
"""

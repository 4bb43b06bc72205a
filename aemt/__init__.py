"""Listing, extracting, patching and audio-track tools for KKIIDDZZ game archives."""

__version__ = "0.1.7"
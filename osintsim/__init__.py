# file: osintsim/__init__.py
"""
osintsim - a cosmetic "phone number investigation" simulator.

Nothing here performs a real lookup. Every finding is synthesized from
pseudo-random values loosely seeded by the input string, and the package also
ships the falling-glyph background animation used by the GUI.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"

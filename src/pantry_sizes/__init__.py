"""
Pantry sizes – product size normalization toolkit.

Parses free-text grocery sizes ("2 pints", "6 x 330ml"), compares them on a
common base unit, prices them per 100ml / 100g / item and matches equivalent
sizes across stores. The engine lives in ``pantry_sizes.sizes``; ``api`` and
``cli`` are thin surfaces over it.
"""

__all__ = [
    "config",
    "logging",
    "sizes",
]

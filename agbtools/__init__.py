"""Conversion tools for tile graphics, palettes, fonts, LZ/RL data, AIFF samples and C arrays."""

__version__ = "0.1.0"
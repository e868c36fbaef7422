"""Character-cell terminal screens: geometry, colours, keys, events, wide-character aware text output and curses back ends."""

__version__ = "0.1.0"
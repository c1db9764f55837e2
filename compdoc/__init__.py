"""Component property documentation for design files."""

__version__ = "0.1.0"

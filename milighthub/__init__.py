"""MiLight hub core: value types, transitions, discovery and UDP gateway protocol servers."""

__version__ = "0.1.0"
"""An in-memory B+ tree keyed by integers, with a small demonstration command."""

__version__ = "0.1.0"
__all__ = ["node", "tree", "demo"]
"""projsync: one-way mirroring of a vault subtree onto a filesystem directory."""

__version__ = "0.4.0"

"""Snapshot types, wire conversions and a request wrapper for building snapshotters."""

__version__ = "0.1.0"
__all__ = ["convert", "example", "snapshotter", "types", "wrap"]
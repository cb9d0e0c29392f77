"""Core data types describing snapshots, their usage and mounts."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Kind(enum.Enum):
    """Snapshot kinds."""

    UNKNOWN = 0
    VIEW = 1
    ACTIVE = 2
    COMMITTED = 3


@dataclass
class Info:
    """Information about a particular snapshot."""

    kind: Kind = Kind.UNKNOWN
    name: str = ""
    parent: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)


@dataclass
class Usage:
    """Disk resources consumed by a snapshot itself, excluding its parents."""

    inodes: int = 0
    size: int = 0

    def __iadd__(self, other: Usage) -> Usage:
        if not isinstance(other, Usage):
            return NotImplemented
        self.inodes += other.inodes
        self.size += other.size
        return self


@dataclass
class Mount:
    """A mount that makes a snapshot available on the filesystem."""

    type: str = ""
    source: str = ""
    target: str = ""
    options: list[str] = field(default_factory=list)
"""The interface a snapshotter implementation provides."""

from __future__ import annotations

import abc
from collections.abc import AsyncIterator, Mapping, Sequence
from typing import Optional

from .types import Info, Mount, Usage


class Snapshotter(abc.ABC):
    """Allocates, snapshots and mounts filesystem changesets.

    A snapshot represents a filesystem state. Every snapshot has a parent,
    where the empty parent is represented by the empty string. Errors are
    reported by raising exceptions.
    """

    @abc.abstractmethod
    async def stat(self, key: str) -> Info:
        """Return the info for an active or committed snapshot by name or key."""

    @abc.abstractmethod
    async def update(self, info: Info, fieldpaths: Optional[Sequence[str]]) -> Info:
        """Update the mutable properties of a snapshot and return the result."""

    @abc.abstractmethod
    async def usage(self, key: str) -> Usage:
        """Return the resource usage of a snapshot, excluding its parents."""

    @abc.abstractmethod
    async def mounts(self, key: str) -> Sequence[Mount]:
        """Return the mounts for the active snapshot identified by key."""

    @abc.abstractmethod
    async def prepare(
        self, key: str, parent: str, labels: Mapping[str, str]
    ) -> Sequence[Mount]:
        """Create an active snapshot identified by key on top of parent."""

    @abc.abstractmethod
    async def view(
        self, key: str, parent: str, labels: Mapping[str, str]
    ) -> Sequence[Mount]:
        """Create a read-only view of parent tracked by key."""

    @abc.abstractmethod
    async def commit(self, name: str, key: str, labels: Mapping[str, str]) -> None:
        """Capture the changes between key and its parent as snapshot name."""

    @abc.abstractmethod
    async def remove(self, key: str) -> None:
        """Remove the committed or active snapshot identified by key."""

    async def clear(self) -> None:
        """Perform deferred resource cleanup; does nothing by default."""
        return None

    @abc.abstractmethod
    def list(self, snapshotter: str, filters: Sequence[str]) -> AsyncIterator[Info]:
        """Return an asynchronous iterator over all matching snapshots."""
"""Serve snapshot requests by delegating them to a Snapshotter."""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass, field
from typing import Optional

from .convert import (
    ConversionError,
    GrpcInfo,
    Status,
    StatusCode,
    info_from_grpc,
    info_to_grpc,
)
from .snapshotter import Snapshotter
from .types import Info, Mount

LIST_BATCH_SIZE = 100


@dataclass
class PrepareSnapshotRequest:
    snapshotter: str = ""
    key: str = ""
    parent: str = ""
    labels: dict[str, str] = field(default_factory=dict)


@dataclass
class PrepareSnapshotResponse:
    mounts: list[Mount] = field(default_factory=list)


@dataclass
class ViewSnapshotRequest:
    snapshotter: str = ""
    key: str = ""
    parent: str = ""
    labels: dict[str, str] = field(default_factory=dict)


@dataclass
class ViewSnapshotResponse:
    mounts: list[Mount] = field(default_factory=list)


@dataclass
class MountsRequest:
    snapshotter: str = ""
    key: str = ""


@dataclass
class MountsResponse:
    mounts: list[Mount] = field(default_factory=list)


@dataclass
class CommitSnapshotRequest:
    snapshotter: str = ""
    name: str = ""
    key: str = ""
    labels: dict[str, str] = field(default_factory=dict)


@dataclass
class RemoveSnapshotRequest:
    snapshotter: str = ""
    key: str = ""


@dataclass
class StatSnapshotRequest:
    snapshotter: str = ""
    key: str = ""


@dataclass
class StatSnapshotResponse:
    info: Optional[GrpcInfo] = None


@dataclass
class FieldMask:
    paths: list[str] = field(default_factory=list)


@dataclass
class UpdateSnapshotRequest:
    snapshotter: str = ""
    info: Optional[GrpcInfo] = None
    update_mask: Optional[FieldMask] = None


@dataclass
class UpdateSnapshotResponse:
    info: Optional[GrpcInfo] = None


@dataclass
class ListSnapshotsRequest:
    snapshotter: str = ""
    filters: list[str] = field(default_factory=list)


@dataclass
class ListSnapshotsResponse:
    info: list[GrpcInfo] = field(default_factory=list)


@dataclass
class UsageRequest:
    snapshotter: str = ""
    key: str = ""


@dataclass
class UsageResponse:
    size: int = 0
    inodes: int = 0


@dataclass
class CleanupRequest:
    snapshotter: str = ""


@contextlib.contextmanager
def _status_errors() -> Iterator[None]:
    """Re-raise any failure of the snapshotter as a Status."""
    try:
        yield
    except Status:
        raise
    except ConversionError as err:
        raise err.to_status() from err
    except Exception as err:
        raise Status(StatusCode.UNKNOWN, str(err)) from err


class Wrapper:
    """Answers snapshot service requests using a Snapshotter."""

    def __init__(self, snapshotter: Snapshotter) -> None:
        self.snapshotter = snapshotter

    async def prepare(self, request: PrepareSnapshotRequest) -> PrepareSnapshotResponse:
        with _status_errors():
            mounts = await self.snapshotter.prepare(
                request.key, request.parent, request.labels
            )
        return PrepareSnapshotResponse(mounts=list(mounts))

    async def view(self, request: ViewSnapshotRequest) -> ViewSnapshotResponse:
        with _status_errors():
            mounts = await self.snapshotter.view(
                request.key, request.parent, request.labels
            )
        return ViewSnapshotResponse(mounts=list(mounts))

    async def mounts(self, request: MountsRequest) -> MountsResponse:
        with _status_errors():
            mounts = await self.snapshotter.mounts(request.key)
        return MountsResponse(mounts=list(mounts))

    async def commit(self, request: CommitSnapshotRequest) -> None:
        with _status_errors():
            await self.snapshotter.commit(request.name, request.key, request.labels)

    async def remove(self, request: RemoveSnapshotRequest) -> None:
        with _status_errors():
            await self.snapshotter.remove(request.key)

    async def stat(self, request: StatSnapshotRequest) -> StatSnapshotResponse:
        with _status_errors():
            info = await self.snapshotter.stat(request.key)
        return StatSnapshotResponse(info=info_to_grpc(info))

    async def update(self, request: UpdateSnapshotRequest) -> UpdateSnapshotResponse:
        if request.info is None:
            raise Status(StatusCode.FAILED_PRECONDITION, "info is required")
        try:
            info = info_from_grpc(request.info)
        except ConversionError as err:
            raise Status(
                StatusCode.INVALID_ARGUMENT, f"Failed to convert timestamp: {err}"
            ) from err

        fields = None if request.update_mask is None else list(request.update_mask.paths)

        with _status_errors():
            updated = await self.snapshotter.update(info, fields)
        return UpdateSnapshotResponse(info=info_to_grpc(updated))

    async def _infos(self, request: ListSnapshotsRequest) -> AsyncIterator[Info]:
        with _status_errors():
            iterator = self.snapshotter.list(request.snapshotter, request.filters).__aiter__()
        while True:
            with _status_errors():
                try:
                    info = await iterator.__anext__()
                except StopAsyncIteration:
                    return
            yield info

    async def list(self, request: ListSnapshotsRequest) -> AsyncIterator[ListSnapshotsResponse]:
        """Yield the snapshots in batches of at most LIST_BATCH_SIZE."""
        batch: list[GrpcInfo] = []
        async for info in self._infos(request):
            batch.append(info_to_grpc(info))
            if len(batch) >= LIST_BATCH_SIZE:
                yield ListSnapshotsResponse(info=batch)
                batch = []
        if batch:
            yield ListSnapshotsResponse(info=batch)

    async def usage(self, request: UsageRequest) -> UsageResponse:
        with _status_errors():
            usage = await self.snapshotter.usage(request.key)
        return UsageResponse(size=usage.size, inodes=usage.inodes)

    async def cleanup(self, request: CleanupRequest) -> None:
        with _status_errors():
            await self.snapshotter.clear()


def server(snapshotter: Snapshotter) -> Wrapper:
    """Create a snapshot service backed by the given snapshotter."""
    return Wrapper(snapshotter)
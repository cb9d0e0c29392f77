"""Conversions between wire-level messages and native snapshot types."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from .types import Info, Kind

_NANOS_PER_SECOND = 1_000_000_000
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class StatusCode(enum.IntEnum):
    """Canonical RPC status codes."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16


class Status(Exception):
    """An RPC error carrying a status code and a message."""

    def __init__(self, code: StatusCode, message: str = "") -> None:
        super().__init__(message)
        self.code = StatusCode(code)
        self.message = message

    def __repr__(self) -> str:
        return f"Status({self.code.name}, {self.message!r})"


class ConversionError(ValueError):
    """A wire-level value could not be turned into a native one."""

    def to_status(self) -> Status:
        """Return the internal-error status that reports this failure."""
        return Status(StatusCode.INTERNAL, str(self))


@dataclass(frozen=True)
class Timestamp:
    """A point in time as seconds and nanoseconds since the Unix epoch."""

    seconds: int = 0
    nanos: int = 0


@dataclass
class GrpcInfo:
    """Snapshot info as carried on the wire."""

    name: str = ""
    parent: str = ""
    kind: int = 0
    created_at: Optional[Timestamp] = None
    updated_at: Optional[Timestamp] = None
    labels: dict[str, str] = field(default_factory=dict)


def kind_to_int(kind: Kind) -> int:
    """Return the wire value of a snapshot kind."""
    return kind.value


def kind_from_int(value: int) -> Kind:
    """Return the snapshot kind for a wire value."""
    try:
        return Kind(value)
    except ValueError:
        raise ConversionError(f"Invalid enum value: {value}") from None


def timestamp_from_datetime(value: datetime) -> Timestamp:
    """Convert a datetime to a timestamp; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    delta = value - _EPOCH
    seconds = delta.days * 86400 + delta.seconds
    return Timestamp(seconds=seconds, nanos=delta.microseconds * 1000)


def timestamp_to_datetime(ts: Timestamp) -> datetime:
    """Convert a timestamp to an aware UTC datetime, normalising nanoseconds."""
    carry, nanos = divmod(ts.nanos, _NANOS_PER_SECOND)
    seconds = ts.seconds + carry
    try:
        return _EPOCH + timedelta(seconds=seconds, microseconds=nanos // 1000)
    except OverflowError as err:
        raise ConversionError(
            f"Failed to convert GRPC timestamp: timestamp out of range ({err})"
        ) from None


def info_from_grpc(info: GrpcInfo) -> Info:
    """Build native snapshot info from its wire form."""
    return Info(
        kind=kind_from_int(info.kind),
        name=info.name,
        parent=info.parent,
        labels=dict(info.labels),
        created_at=timestamp_to_datetime(info.created_at or Timestamp()),
        updated_at=timestamp_to_datetime(info.updated_at or Timestamp()),
    )


def info_to_grpc(info: Info) -> GrpcInfo:
    """Build the wire form of native snapshot info."""
    return GrpcInfo(
        name=info.name,
        parent=info.parent,
        kind=kind_to_int(info.kind),
        created_at=timestamp_from_datetime(info.created_at),
        updated_at=timestamp_from_datetime(info.updated_at),
        labels=dict(info.labels),
    )
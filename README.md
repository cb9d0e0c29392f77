# snapkit

Building blocks for writing a snapshotter: a component that allocates,
snapshots and mounts filesystem changesets, organised as chains of
parent/child snapshots.

A snapshot represents a filesystem state. Every snapshot has a parent; the
empty parent is the empty string. Active snapshots are prepared from a parent,
changed, and then committed under a name so they can serve as the parent of
further snapshots.

The package has no third-party dependencies.

## What is in the package

- `snapkit.types` – the data model: `Kind` (`UNKNOWN`, `VIEW`, `ACTIVE`,
  `COMMITTED`), `Info` (kind, name, parent, labels, `created_at` and
  `updated_at`, both defaulting to the current UTC time), `Usage` (`inodes`
  and `size`, summable in place with `+=`) and `Mount` (`type`, `source`,
  `target`, `options`).
- `snapkit.snapshotter` – `Snapshotter`, the abstract base class you
  implement: the coroutines `stat`, `update`, `usage`, `mounts`, `prepare`,
  `view`, `commit`, `remove` and `clear` (a no-op by default), and `list`,
  which returns an asynchronous iterator of `Info`.
- `snapkit.convert` – conversions between the native types and their wire
  form (`GrpcInfo`, `Timestamp`): `kind_to_int`, `kind_from_int`,
  `timestamp_from_datetime`, `timestamp_to_datetime`, `info_to_grpc` and
  `info_from_grpc`; plus the `Status` exception with its `StatusCode`, and
  `ConversionError` for values that cannot be converted.
- `snapkit.wrap` – request and response messages (`PrepareSnapshotRequest`,
  `ListSnapshotsResponse`, `UsageResponse`, and so on) and `Wrapper`, which
  answers each request by calling your snapshotter. `server(snapshotter)`
  builds one.
- `snapkit.example` – `ExampleSnapshotter`, a minimal implementation that
  logs each call through the `logging` module and returns empty or default
  results.

## Writing a snapshotter

Subclass `Snapshotter` and implement its methods:

```python
from snapkit.snapshotter import Snapshotter
from snapkit.types import Info, Kind, Usage


class MemorySnapshotter(Snapshotter):
    def __init__(self):
        self._snapshots = {}

    async def stat(self, key):
        return self._snapshots[key]

    async def update(self, info, fieldpaths):
        self._snapshots[info.name] = info
        return info

    async def usage(self, key):
        return Usage()

    async def mounts(self, key):
        return []

    async def prepare(self, key, parent, labels):
        self._snapshots[key] = Info(kind=Kind.ACTIVE, name=key, parent=parent, labels=dict(labels))
        return []

    async def view(self, key, parent, labels):
        self._snapshots[key] = Info(kind=Kind.VIEW, name=key, parent=parent, labels=dict(labels))
        return []

    async def commit(self, name, key, labels):
        active = self._snapshots.pop(key)
        self._snapshots[name] = Info(
            kind=Kind.COMMITTED, name=name, parent=active.parent, labels=dict(labels)
        )

    async def remove(self, key):
        del self._snapshots[key]

    async def list(self, snapshotter, filters):
        for info in list(self._snapshots.values()):
            yield info
```

`list` may be an async generator, as above, or any method that returns an
asynchronous iterator.

## Handling requests

`server()` wraps a snapshotter in a `Wrapper`, whose coroutine methods take
request messages and return response messages. `commit`, `remove` and
`cleanup` return `None`; `list` is an async generator of
`ListSnapshotsResponse` batches of at most 100 snapshots each
(`snapkit.wrap.LIST_BATCH_SIZE`).

```python
import asyncio

from snapkit.wrap import ListSnapshotsRequest, PrepareSnapshotRequest, server


async def demo():
    handler = server(MemorySnapshotter())
    await handler.prepare(PrepareSnapshotRequest(key="work", parent="", labels={}))
    async for batch in handler.list(ListSnapshotsRequest(snapshotter="memory", filters=[])):
        for info in batch.info:
            print(info.name, info.kind)


asyncio.run(demo())
```

Every failure leaves the wrapper as a `Status` exception:

- a `Status` raised by the snapshotter passes through unchanged;
- a `ConversionError` raised by the snapshotter becomes `INTERNAL`;
- any other exception from the snapshotter becomes `UNKNOWN`, carrying its
  message;
- an `UpdateSnapshotRequest` without `info` is rejected with
  `FAILED_PRECONDITION`, and one whose info cannot be converted (unknown kind,
  out-of-range timestamp) with `INVALID_ARGUMENT`.

For updates, the `update_mask` paths are passed to the snapshotter as a list,
or `None` when the request carries no mask.

## Conversions

```python
from snapkit.convert import info_from_grpc, info_to_grpc, kind_from_int
from snapkit.types import Info, Kind

wire = info_to_grpc(Info(kind=Kind.COMMITTED, name="base"))
assert info_from_grpc(wire).name == "base"
assert kind_from_int(3) is Kind.COMMITTED
```

Naive datetimes are taken as UTC when turned into a `Timestamp`; times come
back as aware UTC datetimes with microsecond precision. A missing timestamp
in a `GrpcInfo` is read as the Unix epoch. An unknown kind number or an
out-of-range timestamp raises `ConversionError`, a `ValueError`;
`ConversionError.to_status()` turns it into an `INTERNAL` `Status`.

## What the package does not do

There is no network transport: nothing listens on a socket or speaks an RPC
protocol, and the package has no command to run. `Wrapper` works on the
request and response objects in `snapkit.wrap`; connecting it to a transport
is up to you. Likewise no snapshotter that stores or mounts real filesystems
is included – `ExampleSnapshotter` only logs and returns empty results.
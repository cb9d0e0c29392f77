import pytest

from snapkit.snapshotter import Snapshotter
from snapkit.types import Info, Kind, Mount, Usage


class MemorySnapshotter(Snapshotter):
    def __init__(self):
        self.snapshots = {}

    async def stat(self, key):
        try:
            return self.snapshots[key]
        except KeyError:
            raise LookupError(key) from None

    async def update(self, info, fieldpaths):
        current = self.snapshots[info.name]
        if fieldpaths is None or "labels" in fieldpaths:
            current.labels = dict(info.labels)
        return current

    async def usage(self, key):
        await self.stat(key)
        return Usage(inodes=1, size=4096)

    async def mounts(self, key):
        await self.stat(key)
        return [Mount(type="bind", source=f"/store/{key}", target="", options=["rw"])]

    async def prepare(self, key, parent, labels):
        if key in self.snapshots:
            raise FileExistsError(key)
        self.snapshots[key] = Info(Kind.ACTIVE, key, parent, dict(labels))
        return await self.mounts(key)

    async def view(self, key, parent, labels):
        if key in self.snapshots:
            raise FileExistsError(key)
        self.snapshots[key] = Info(Kind.VIEW, key, parent, dict(labels))
        return await self.mounts(key)

    async def commit(self, name, key, labels):
        active = self.snapshots.pop(key)
        self.snapshots[name] = Info(Kind.COMMITTED, name, active.parent, dict(labels))

    async def remove(self, key):
        del self.snapshots[key]

    async def list(self, snapshotter, filters):
        for info in list(self.snapshots.values()):
            yield info


def _bind_mount(key):
    return [Mount(type="bind", source=f"/store/{key}", target="", options=["rw"])]


def test_snapshotter_is_abstract():
    with pytest.raises(TypeError):
        Snapshotter()

    class Partial(Snapshotter):
        async def stat(self, key):
            return Info()

    with pytest.raises(TypeError) as excinfo:
        Partial()
    assert "update" in str(excinfo.value)


@pytest.mark.asyncio
async def test_default_clear_returns_none():
    snap = MemorySnapshotter()
    await snap.prepare("k", "", {})
    assert await Snapshotter.clear(snap) is None
    assert (await snap.stat("k")).name == "k"


@pytest.mark.asyncio
async def test_prepare_then_stat():
    snap = MemorySnapshotter()
    mounts = await snap.prepare("k1", "", {"a": "b"})
    assert mounts == [Mount(type="bind", source="/store/k1", target="", options=["rw"])]
    info = await snap.stat("k1")
    assert info.kind is Kind(2)
    assert info.labels == {"a": "b"}


@pytest.mark.asyncio
async def test_double_prepare_fails():
    snap = MemorySnapshotter()
    mounts = await snap.prepare("k1", "", {})
    assert mounts == [Mount(type="bind", source="/store/k1", target="", options=["rw"])]
    with pytest.raises(FileExistsError):
        await snap.view("k1", "", {})


@pytest.mark.asyncio
async def test_commit_replaces_active():
    snap = MemorySnapshotter()
    await snap.prepare("k1", "base", {})
    await snap.commit("layer", "k1", {})
    committed = await snap.stat("layer")
    assert committed.kind is Kind(3)
    assert committed.parent == "base"
    assert await snap.usage("layer") == Usage(inodes=1, size=4096)
    with pytest.raises(LookupError):
        await snap.stat("k1")


@pytest.mark.asyncio
async def test_list_iterates_all():
    snap = MemorySnapshotter()
    await snap.prepare("a", "", {})
    await snap.view("b", "", {})
    kinds = {info.name: info.kind async for info in snap.list("default", [])}
    assert kinds == {"a": Kind(2), "b": Kind(1)}
    assert await snap.mounts("b") == [
        Mount(type="bind", source="/store/b", target="", options=["rw"])
    ]


@pytest.mark.asyncio
async def test_remove_and_usage():
    snap = MemorySnapshotter()
    await snap.prepare("k", "", {})
    usage = await snap.usage("k")
    assert usage == Usage(inodes=1, size=4096)
    await snap.remove("k")
    assert [i async for i in snap.list("default", [])] == []
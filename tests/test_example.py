import logging

import pytest

from snapkit.example import ExampleSnapshotter
from snapkit.types import Info, Kind, Usage
from snapkit.wrap import (
    ListSnapshotsRequest,
    StatSnapshotRequest,
    UsageRequest,
    Wrapper,
)

LOGGER = "snapkit.example"


@pytest.mark.asyncio
async def test_stat_returns_default_info_and_logs(caplog):
    caplog.set_level(logging.INFO, logger=LOGGER)
    info = await ExampleSnapshotter().stat("base")
    assert (info.kind, info.name, info.parent, info.labels) == (Kind.UNKNOWN, "", "", {})
    assert "Stat: base" in caplog.messages


@pytest.mark.asyncio
async def test_update_returns_fresh_default_info():
    given = Info(kind=Kind.ACTIVE, name="n", labels={"a": "b"})
    result = await ExampleSnapshotter().update(given, ["labels.a"])
    assert result.name == ""
    assert result.kind is Kind.UNKNOWN
    assert result.labels == {}


@pytest.mark.asyncio
async def test_usage_is_zero():
    assert await ExampleSnapshotter().usage("k") == Usage()


@pytest.mark.asyncio
async def test_mount_operations_return_no_mounts(caplog):
    caplog.set_level(logging.INFO, logger=LOGGER)
    snap = ExampleSnapshotter()
    assert await snap.mounts("k") == []
    assert await snap.prepare("k", "p", {"a": "b"}) == []
    assert await snap.view("v", "p", {}) == []
    assert "Mounts: k" in caplog.messages
    assert any(m.startswith("Prepare: key=k, parent=p") for m in caplog.messages)
    assert any(m.startswith("View: key=v, parent=p") for m in caplog.messages)


@pytest.mark.asyncio
async def test_commit_and_remove_log(caplog):
    caplog.set_level(logging.INFO, logger=LOGGER)
    snap = ExampleSnapshotter()
    assert await snap.commit("n", "k", {}) is None
    assert await snap.remove("k") is None
    assert any(m.startswith("Commit: name=n, key=k") for m in caplog.messages)
    assert "Remove: k" in caplog.messages


@pytest.mark.asyncio
async def test_list_yields_nothing(caplog):
    caplog.set_level(logging.INFO, logger=LOGGER)
    items = [info async for info in ExampleSnapshotter().list("s", ["f"])]
    assert items == []
    assert any(m.startswith("List: snapshotter=s") for m in caplog.messages)


@pytest.mark.asyncio
async def test_served_through_wrapper():
    wrapper = Wrapper(ExampleSnapshotter())
    batches = [b async for b in wrapper.list(ListSnapshotsRequest(snapshotter="s"))]
    assert batches == []
    stat = await wrapper.stat(StatSnapshotRequest(key="k"))
    assert stat.info.kind == Kind.UNKNOWN.value
    usage = await wrapper.usage(UsageRequest(key="k"))
    assert (usage.size, usage.inodes) == (0, 0)
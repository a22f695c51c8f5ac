"""Tests for bounded parallel uploads."""
import asyncio
from collections import Counter
from unittest.mock import AsyncMock, Mock

import pytest

from puter_deploy.models import FileEntry
from puter_deploy.orchestrator.parallel import UploadScheduler, run_bounded


class TestRunBounded:
    @pytest.mark.asyncio
    async def test_each_index_exactly_once(self):
        seen = []
        in_flight = 0
        peak = 0

        async def worker(item, index):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.001 * (index % 3))
            seen.append(index)
            in_flight -= 1

        completed = await run_bounded(list(range(10)), 3, worker)

        assert completed == 10
        assert Counter(seen) == Counter(range(10))
        assert peak <= 3

    @pytest.mark.asyncio
    async def test_empty_is_noop(self):
        worker = AsyncMock()
        assert await run_bounded([], 8, worker) == 0
        worker.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -5])
    async def test_limit_clamped_to_one(self, limit):
        in_flight = 0
        peak = 0

        async def worker(item, index):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0)
            in_flight -= 1

        assert await run_bounded(["a", "b", "c"], limit, worker) == 3
        assert peak == 1

    @pytest.mark.asyncio
    async def test_first_failure_stops_new_work(self):
        started = []

        async def worker(item, index):
            started.append(index)
            if index == 2:
                raise RuntimeError("upload failed")
            await asyncio.sleep(0)

        with pytest.raises(RuntimeError, match="upload failed"):
            await run_bounded(list(range(50)), 1, worker)

        assert started == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_failure_waits_for_in_flight_siblings(self):
        sibling_done = False

        async def worker(item, index):
            nonlocal sibling_done
            if index == 0:
                raise RuntimeError("boom")
            await asyncio.sleep(0.05)
            sibling_done = True

        with pytest.raises(RuntimeError, match="boom"):
            await run_bounded([0, 1], 2, worker)

        assert sibling_done is True

    @pytest.mark.asyncio
    async def test_first_failure_is_reraised(self):
        async def worker(item, index):
            if index == 0:
                await asyncio.sleep(0.02)
                raise RuntimeError("late")
            raise ValueError("early")

        with pytest.raises(ValueError, match="early"):
            await run_bounded([0, 1], 2, worker)

    @pytest.mark.asyncio
    async def test_progress_every_25_and_final(self):
        progress = Mock()

        async def worker(item, index):
            await asyncio.sleep(0)

        await run_bounded(list(range(60)), 4, worker, on_progress=progress)

        reported = [call.args[0].completed for call in progress.call_args_list]
        assert reported == [25, 50, 60]
        assert progress.call_args_list[-1].args[0].total == 60

    @pytest.mark.asyncio
    async def test_async_progress_callback(self):
        progress = AsyncMock()

        async def worker(item, index):
            return None

        await run_bounded([1, 2], 2, worker, on_progress=progress)

        progress.assert_awaited_once()


class TestUploadScheduler:
    @pytest.fixture
    def entries(self, tmp_path):
        (tmp_path / "css").mkdir()
        (tmp_path / "index.html").write_bytes(b"<html></html>")
        (tmp_path / "css" / "site.css").write_bytes(b"body {}")
        return [
            FileEntry(tmp_path / "index.html", "index.html"),
            FileEntry(tmp_path / "css" / "site.css", "css/site.css"),
        ]

    def test_plan_normalizes_destinations(self, entries):
        tasks = UploadScheduler.plan(entries, "a/b/")
        assert [t.remote_path for t in tasks] == ["a/b/index.html", "a/b/css/site.css"]

    @pytest.mark.asyncio
    async def test_upload_is_strict_upsert(self, entries, fake_fs):
        count = await UploadScheduler(fake_fs, 8).upload(entries, "/me/site/")

        assert count == 2
        by_path = {w["path"]: w for w in fake_fs.writes}
        assert set(by_path) == {"/me/site/index.html", "/me/site/css/site.css"}
        assert by_path["/me/site/index.html"]["data"] == b"<html></html>"
        for write in fake_fs.writes:
            assert write["overwrite"] is True
            assert write["dedupe_name"] is False
            assert write["create_missing_parents"] is True

    @pytest.mark.asyncio
    async def test_upload_nothing(self, fake_fs):
        assert await UploadScheduler(fake_fs, 8).upload([], "/me/site") == 0
        assert fake_fs.writes == []

    @pytest.mark.asyncio
    async def test_write_failure_propagates(self, entries):
        fs = Mock()
        fs.write = AsyncMock(side_effect=RuntimeError("quota exceeded"))

        with pytest.raises(RuntimeError, match="quota exceeded"):
            await UploadScheduler(fs, 1).upload(entries, "/me/site")
        fs.write.assert_awaited_once()

"""Tests for progress aggregation."""
import asyncio
from unittest.mock import Mock

import pytest

from adls_uploader.core.upload.models import FileItem, ChunkInfo
from adls_uploader.core.upload.progress import ProgressAggregator, percentage


class TestPercentage:
    """Test suite for percentage helper."""
    
    def test_ratio(self):
        assert percentage(1, 4) == 25.0
    
    def test_zero_total(self):
        """Test empty totals read as 0 instead of dividing by zero."""
        assert percentage(0, 0) == 0.0


class TestProgressAggregator:
    """Test suite for ProgressAggregator."""
    
    @pytest.fixture
    def hooks(self):
        return Mock(), Mock()
    
    @pytest.fixture
    def aggregator(self, hooks):
        on_item_progress, on_progress = hooks
        return ProgressAggregator(on_item_progress, on_progress)
    
    def test_begin_run_snapshots_size(self, aggregator, make_file):
        """Test size and bytes are seeded from the run's items."""
        done = FileItem(file=make_file('a', 4), uploaded_bytes=4, progress=100.0)
        pending = FileItem(file=make_file('b', 4))
        
        aggregator.begin_run([done, pending])
        
        assert aggregator.size == 8
        assert aggregator.uploaded_bytes == 4
        assert aggregator.progress == 50.0
    
    def test_cumulative_reports_become_deltas(self, aggregator, hooks, make_file):
        """Test cumulative reports advance item and run counters."""
        on_item_progress, on_progress = hooks
        item = FileItem(file=make_file('a', 4))
        aggregator.begin_run([item])
        report = aggregator.reporter(item, ChunkInfo(0, 0, 4))
        
        report(1)
        report(3)
        
        assert item.uploaded_bytes == 3
        assert item.progress == 75.0
        assert aggregator.uploaded_bytes == 3
        assert on_item_progress.call_count == 2
        on_progress.assert_called_with(75.0)
    
    def test_reports_are_relative_to_chunk_start(self, aggregator, make_file):
        """Test a second chunk's report is offset by the chunk start."""
        item = FileItem(file=make_file('a', 4))
        aggregator.begin_run([item])
        
        aggregator.reporter(item, ChunkInfo(0, 0, 3))(3)
        aggregator.reporter(item, ChunkInfo(1, 3, 4))(1)
        
        assert item.uploaded_bytes == 4
        assert item.progress == 100.0
        assert aggregator.progress == 100.0
    
    def test_retry_does_not_double_count(self, aggregator, hooks, make_file):
        """Test a retried attempt reporting from zero adds only new bytes."""
        on_item_progress, _ = hooks
        item = FileItem(file=make_file('a', 10))
        aggregator.begin_run([item])
        chunk = ChunkInfo(0, 0, 10)
        
        aggregator.reporter(item, chunk)(6)
        retry = aggregator.reporter(item, chunk)
        retry(2)
        retry(6)
        retry(10)
        
        assert item.uploaded_bytes == 10
        assert aggregator.uploaded_bytes == 10
        assert on_item_progress.call_count == 2
    
    def test_advance_never_passes_file_size(self, aggregator, make_file):
        """Test over-reporting transports are clamped."""
        item = FileItem(file=make_file('a', 4))
        aggregator.begin_run([item])
        
        aggregator.advance(item, 10)
        
        assert item.uploaded_bytes == 4
        assert aggregator.uploaded_bytes == 4
    
    def test_restart_item_withdraws_bytes(self, aggregator, make_file):
        """Test restarting an item removes its bytes from the run."""
        item = FileItem(file=make_file('a', 4), uploaded_bytes=2, progress=50.0)
        other = FileItem(file=make_file('b', 4), uploaded_bytes=4, progress=100.0)
        aggregator.begin_run([item, other])
        
        aggregator.restart_item(item)
        
        assert item.uploaded_bytes == 0
        assert item.progress == 0
        assert aggregator.uploaded_bytes == 4
        assert aggregator.progress == 50.0
    
    def test_hook_order(self, make_file):
        """Test item hook fires before the run hook."""
        calls = []
        aggregator = ProgressAggregator(
            lambda item: calls.append('item'),
            lambda percent: calls.append('run')
        )
        item = FileItem(file=make_file('a', 2))
        aggregator.begin_run([item])
        
        aggregator.advance(item, 1)
        
        assert calls == ['item', 'run']
    
    @pytest.mark.asyncio
    async def test_async_hooks_are_not_awaited(self, make_file):
        """Test coroutine hooks are scheduled, not awaited inline."""
        started = asyncio.Event()
        release = asyncio.Event()
        
        async def slow_hook(percent):
            started.set()
            await release.wait()
        
        aggregator = ProgressAggregator(lambda item: None, slow_hook)
        item = FileItem(file=make_file('a', 2))
        aggregator.begin_run([item])
        
        aggregator.advance(item, 2)
        assert item.uploaded_bytes == 2
        
        await asyncio.wait_for(started.wait(), timeout=1)
        release.set()
        for _ in range(10):
            await asyncio.sleep(0)
        assert not aggregator._pending

"""Pytest fixtures for adls_uploader tests."""
import asyncio
from typing import List, Optional

import pytest

from adls_uploader import MemoryFile


class FakeFileClient:
    """Transfer client double recording every call on a shared log."""

    def __init__(self, url: str, backend: 'FakeBackend'):
        self.url = url
        self._backend = backend

    async def create(self):
        self._backend.calls.append(('create', self.url))
        if self._backend.create_error:
            raise self._backend.create_error

    async def transfer(self, data, offset, length, *, on_progress=None, abort_signal=None):
        backend = self._backend
        backend.calls.append(('transfer', self.url, offset, length))
        backend.transfer_attempts += 1
        if backend.fail_transfers > 0:
            backend.fail_transfers -= 1
            if backend.report_before_failure and on_progress:
                on_progress(backend.report_before_failure)
            raise ConnectionError("append failed")
        if backend.transfer_delay:
            await asyncio.sleep(backend.transfer_delay)
        if backend.report_bytewise:
            for loaded in range(1, length + 1):
                on_progress(loaded)
        elif backend.report_progress and on_progress:
            on_progress(length)
        backend.appended.append(bytes(data[:length]))

    async def finalize(self, size, *, content_type=None):
        self._backend.calls.append(('finalize', self.url, size, content_type))


class FakeBackend:
    """Configurable fake remote store and client factory."""

    def __init__(self):
        self.calls: List[tuple] = []
        self.appended: List[bytes] = []
        self.transfer_attempts = 0
        self.fail_transfers = 0
        self.report_before_failure = 0
        self.report_bytewise = False
        self.report_progress = True
        self.transfer_delay = 0.0
        self.create_error: Optional[Exception] = None
        self.closed = 0

    def __call__(self, url: str) -> FakeFileClient:
        return FakeFileClient(url, self)

    async def close(self):
        self.closed += 1

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


@pytest.fixture
def backend():
    """Fake transfer client factory."""
    return FakeBackend()


@pytest.fixture
def make_file():
    """Builds in-memory files of a given size."""
    def factory(name: str = 'file', size: int = 1, type: str = 'image/png') -> MemoryFile:
        return MemoryFile(name, bytes(i % 256 for i in range(size)), type=type)
    return factory

"""Tests for the async_utils module."""

import threading

import pytest

from projsync.core.async_utils import run_sync


def _sync_add(a: int, b: int) -> int:
    return a + b


async def test_run_sync_calls_function():
    """run_sync delegates to a worker thread with correct args."""
    result = await run_sync(_sync_add, 3, 4)
    assert result == 7


async def test_run_sync_passes_kwargs():
    def _kw_func(*, name: str) -> str:
        return f"hello {name}"

    assert await run_sync(_kw_func, name="vault") == "hello vault"


async def test_run_sync_uses_worker_thread():
    main = threading.get_ident()
    worker = await run_sync(threading.get_ident)
    assert worker != main


async def test_run_sync_propagates_exceptions():
    def _boom():
        raise NotADirectoryError("nope")

    with pytest.raises(NotADirectoryError, match="nope"):
        await run_sync(_boom)

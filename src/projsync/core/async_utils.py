"""Async utilities for bridging blocking filesystem work to async MCP handlers."""

import asyncio
import logging
from typing import Any, Callable, TypeVar

T = TypeVar("T")
logger = logging.getLogger(__name__)


async def run_sync(
    func: Callable[..., T], *args: Any, **kwargs: Any
) -> T:
    """Run a synchronous function in a thread pool without blocking the event loop.

    Used by tool handlers for vault scans and note reads, which touch the
    filesystem and may be slow on large vaults.

    Args:
        func: Synchronous function to call
        *args: Positional arguments for func
        **kwargs: Keyword arguments for func

    Returns:
        Result of func(*args, **kwargs)

    Example:
        tree = await run_sync(scan_vault, vault_root)
    """
    return await asyncio.to_thread(func, *args, **kwargs)

"""Helpers for calling blocking vendor SDKs from coroutines."""

import asyncio
import functools
from typing import Any, Callable


async def run_sync(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """
    Run a blocking call in the default executor and await its result.

    Exceptions raised by ``func`` propagate to the awaiting caller unchanged.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))

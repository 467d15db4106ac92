import inspect
from typing import Any, Callable


async def maybe_await(func: Callable, *args) -> Any:
    """Calls func and awaits the result when it is awaitable."""
    result = func(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def format_size(size: int) -> str:
    """Formats a byte count as a human readable string."""
    value = float(size)
    for unit in ('B', 'KB', 'MB', 'GB'):
        if value < 1024:
            return f"{value:.0f} {unit}" if unit == 'B' else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TB"

"""Helpers shared by the @Logger.io decorator."""

import time
from typing import Any, Callable

from src.platform.logging.loguru_io_config import (
    SENSITIVE_KEYWORDS,
    call_depth_var,
    chain_start_time_var,
)


MASK = '*****'
MAX_CONTENT_LENGTH = 500


def build_call_target_func_path(func: Callable[..., Any]) -> str:
    module = getattr(func, '__module__', '') or ''
    qualname = getattr(func, '__qualname__', getattr(func, '__name__', repr(func)))
    return f'{module.rsplit(".", 1)[-1]}.{qualname}'


def get_chain_start_time() -> str:
    """Elapsed time since the outermost decorated call of the current chain."""
    now = time.perf_counter()
    if call_depth_var.get() <= 1 or not chain_start_time_var.get():
        chain_start_time_var.set(now)
        return 'chain+0.000s'
    return f'chain+{now - chain_start_time_var.get():.3f}s'


def reset_call_depth() -> None:
    depth = max(call_depth_var.get() - 1, 0)
    call_depth_var.set(depth)
    if depth == 0:
        chain_start_time_var.set(0)


def should_mask_keyword(key: Any, value: Any) -> Any:
    if isinstance(key, str) and any(word in key.lower() for word in SENSITIVE_KEYWORDS):
        return MASK
    return value


def mask_sensitive(data: Any) -> Any:
    """Mask bare card numbers (12-19 digits), keeping the last four digits."""
    if isinstance(data, str):
        digits = data.replace(' ', '').replace('-', '')
        if digits.isdigit() and 12 <= len(digits) <= 19:
            return f'{MASK}{digits[-4:]}'
    return data


def truncate_content(data: Any) -> Any:
    text = repr(data) if not isinstance(data, str) else data
    if len(text) > MAX_CONTENT_LENGTH:
        return f'{text[:MAX_CONTENT_LENGTH]}...(+{len(text) - MAX_CONTENT_LENGTH} chars)'
    return data

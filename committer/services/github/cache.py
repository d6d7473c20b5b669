"""
TTL caching for GitHub API responses.

Repository metadata is looked up once per run; the cache keeps repeated
lookups of the same repository (e.g. several runs in one process) off the API.
"""

import hashlib
import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar

from cachetools import TTLCache  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

_repo_details_cache: TTLCache[str, Any] = TTLCache(maxsize=64, ttl=600)  # 10 min


def _make_cache_key(func_name: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    """
    Generate a cache key from function name and arguments.

    The first positional arg is the instance; its `cache_scope` (API host and
    credentials) is part of the key so clients never share each other's results.
    """
    scope = getattr(args[0], "cache_scope", "") if args else ""
    cache_args = args[1:] if args else ()
    key_data = f"{func_name}:{scope}:{cache_args}:{sorted(kwargs.items())}"
    return hashlib.md5(key_data.encode()).hexdigest()


def cached_github_call(
    cache: TTLCache[str, Any],
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Decorator for caching async GitHub API calls.

    Usage:
        @cached_github_call(repo_details_cache)
        async def get_repository(self, owner: str, name: str) -> Repository:
            ...

    Only successful results are stored; a raised error is never cached.
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            key = _make_cache_key(func.__name__, args, kwargs)

            if key in cache:
                logger.debug(f"Cache HIT: {func.__name__}")
                cached_result: T = cache[key]
                return cached_result

            logger.debug(f"Cache MISS: {func.__name__}")
            result = await func(*args, **kwargs)
            cache[key] = result
            return result

        return wrapper

    return decorator


def clear_all_caches() -> None:
    """Clear all GitHub caches. Useful for testing or when data is known to be stale."""
    _repo_details_cache.clear()
    logger.debug("Cleared all GitHub caches")


repo_details_cache = _repo_details_cache

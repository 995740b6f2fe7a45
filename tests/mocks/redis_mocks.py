"""
Mock factory functions for Redis testing.

Provides pre-configured Redis mocks with common operations.
"""

from unittest.mock import AsyncMock, MagicMock


def create_mock_redis_connection():
    """
    Creates a mock Redis connection with common methods.

    Returns:
        AsyncMock: Mocked Redis connection
    """
    redis_mock = AsyncMock()

    # Key-value operations
    redis_mock.get = AsyncMock(return_value=None)
    redis_mock.mget = AsyncMock(return_value=[])
    redis_mock.set = AsyncMock(return_value=True)
    redis_mock.delete = AsyncMock(return_value=1)

    # List operations
    redis_mock.lpush = AsyncMock(return_value=1)
    redis_mock.lrange = AsyncMock(return_value=[])
    redis_mock.lrem = AsyncMock(return_value=1)
    redis_mock.ltrim = AsyncMock(return_value=True)

    # Expiry
    redis_mock.expire = AsyncMock(return_value=True)

    # Set operations
    redis_mock.sadd = AsyncMock(return_value=1)
    redis_mock.srem = AsyncMock(return_value=1)
    redis_mock.smembers = AsyncMock(return_value=set())

    # Connection management
    redis_mock.ping = AsyncMock(return_value=True)
    redis_mock.close = AsyncMock()

    return redis_mock


def create_mock_pubsub(messages: list):
    """
    Creates a mock Redis pubsub whose ``get_message`` yields ``messages``.

    Items may be message dicts, None (no message) or exceptions to raise.
    """
    pubsub_mock = MagicMock()
    pubsub_mock.psubscribe = AsyncMock()
    pubsub_mock.get_message = AsyncMock(side_effect=messages)
    return pubsub_mock


def create_in_memory_redis():
    """
    Creates a mock Redis backed by dictionaries.

    Supports the string, list, set and expiry commands used by the
    repositories. Expiries are recorded in ``ttls`` (seconds) but never fire.
    """
    strings: dict[str, str] = {}
    ttls: dict[str, int] = {}
    lists: dict[str, list[str]] = {}
    sets: dict[str, set[str]] = {}

    async def _get(key):
        return strings.get(key)

    async def _mget(keys):
        return [strings.get(key) for key in keys]

    async def _set(key, value, ex=None, px=None, keepttl=False):
        strings[key] = value
        if ex is not None:
            ttls[key] = ex
        return True

    async def _delete(*keys):
        removed = 0
        for key in keys:
            for store in (strings, lists, sets):
                if store.pop(key, None) is not None:
                    removed += 1
        return removed

    async def _lpush(key, *values):
        lists.setdefault(key, [])[:0] = list(reversed(values))
        return len(lists[key])

    async def _lrange(key, start, end):
        items = lists.get(key, [])
        return items[start:] if end == -1 else items[start : end + 1]

    async def _lrem(key, count, value):
        items = lists.get(key, [])
        before = len(items)
        lists[key] = [item for item in items if item != value]
        return before - len(lists[key])

    async def _ltrim(key, start, end):
        lists[key] = lists.get(key, [])[start : end + 1]
        return True

    async def _expire(key, seconds):
        ttls[key] = seconds
        return True

    async def _sadd(key, *values):
        target = sets.setdefault(key, set())
        added = len(set(values) - target)
        target.update(values)
        return added

    async def _srem(key, *values):
        target = sets.get(key, set())
        removed = len(target & set(values))
        target.difference_update(values)
        return removed

    async def _smembers(key):
        return set(sets.get(key, set()))

    redis_mock = create_mock_redis_connection()
    redis_mock.get = AsyncMock(side_effect=_get)
    redis_mock.mget = AsyncMock(side_effect=_mget)
    redis_mock.set = AsyncMock(side_effect=_set)
    redis_mock.delete = AsyncMock(side_effect=_delete)
    redis_mock.lpush = AsyncMock(side_effect=_lpush)
    redis_mock.lrange = AsyncMock(side_effect=_lrange)
    redis_mock.lrem = AsyncMock(side_effect=_lrem)
    redis_mock.sadd = AsyncMock(side_effect=_sadd)
    redis_mock.srem = AsyncMock(side_effect=_srem)
    redis_mock.smembers = AsyncMock(side_effect=_smembers)
    redis_mock.ltrim = AsyncMock(side_effect=_ltrim)
    redis_mock.expire = AsyncMock(side_effect=_expire)
    redis_mock.ttls = ttls
    return redis_mock

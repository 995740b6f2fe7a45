"""
Tests for the session expiry watcher.
"""

from asyncio import CancelledError
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from marketplace.tasks.session_expiry import session_expiry_task
from tests.mocks.redis_mocks import create_mock_pubsub


def expired(key: str) -> dict:
    return {"type": "pmessage", "data": key}


@pytest.fixture
def terminator():
    terminator = MagicMock()
    terminator.force_logout = AsyncMock(return_value=True)
    return terminator


def run_with(messages, redis_results):
    """Patch Redis and sleeping for one run of the task."""
    pubsub = create_mock_pubsub(messages)
    redis = MagicMock()
    redis.pubsub.return_value = pubsub

    get_redis = AsyncMock(
        side_effect=[redis if r else None for r in redis_results]
    )
    return (
        pubsub,
        patch(
            "marketplace.tasks.session_expiry.get_auth_redis_connection",
            new=get_redis,
        ),
        patch("marketplace.tasks.session_expiry.sleep", new=AsyncMock()),
    )


class TestSessionExpiryTask:
    @pytest.mark.asyncio
    async def test_expired_session_is_logged_out(self, terminator, session_id):
        pubsub, redis_patch, sleep_patch = run_with(
            [expired(f"session:{session_id}"), CancelledError()], [True]
        )

        with redis_patch, sleep_patch:
            await session_expiry_task(terminator)

        pubsub.psubscribe.assert_awaited_once_with("__keyevent@*__:expired")
        terminator.force_logout.assert_awaited_once_with(session_id)

    @pytest.mark.asyncio
    async def test_other_keys_are_ignored(self, terminator):
        _, redis_patch, sleep_patch = run_with(
            [expired("notification:n-1"), None, CancelledError()], [True]
        )

        with redis_patch, sleep_patch:
            await session_expiry_task(terminator)

        terminator.force_logout.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_error_resubscribes(self, terminator, session_id):
        pubsub, redis_patch, sleep_patch = run_with(
            [
                ConnectionError("lost"),
                expired(f"session:{session_id}"),
                CancelledError(),
            ],
            [True, True],
        )

        with redis_patch, sleep_patch:
            await session_expiry_task(terminator)

        assert pubsub.psubscribe.await_count == 2
        terminator.force_logout.assert_awaited_once_with(session_id)

    @pytest.mark.asyncio
    async def test_waits_for_redis(self, terminator):
        _, redis_patch, sleep_patch = run_with(
            [CancelledError()], [False, True]
        )

        with redis_patch, sleep_patch as sleep:
            await session_expiry_task(terminator)

        sleep.assert_awaited()

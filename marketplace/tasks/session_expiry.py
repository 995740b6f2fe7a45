from asyncio import CancelledError, sleep

from marketplace.constants import (
    REDIS_EXPIRED_KEYS_PATTERN,
    REDIS_MESSAGE_TIMEOUT_SECONDS,
    TASK_SLEEP_INTERVAL_SECONDS,
)
from marketplace.logging import logger
from marketplace.services.session_terminator import SessionTerminator
from marketplace.settings import app_settings
from marketplace.storage.redis import get_auth_redis_connection


async def session_expiry_task(terminator: SessionTerminator):
    """
    Signal ``ForceLogout`` to connections whose session key expired in Redis.

    Subscribes to the ``__keyevent@*__:expired`` channel; session keys
    expire shortly after the session itself, so their expiry event is the
    cue to tell the client its session is over. Errors drop the
    subscription, which is rebuilt on the next iteration.
    """
    prefix = app_settings.USER_SESSION_REDIS_KEY_PREFIX
    rch = None

    while True:
        try:
            if not rch:
                r = await get_auth_redis_connection()
                if r is None:
                    raise ConnectionError("Session store unavailable")

                rch = r.pubsub()
                await rch.psubscribe(REDIS_EXPIRED_KEYS_PATTERN)

            event = await rch.get_message(
                ignore_subscribe_messages=True,
                timeout=REDIS_MESSAGE_TIMEOUT_SECONDS,
            )

            if not event:
                await sleep(TASK_SLEEP_INTERVAL_SECONDS)
                continue

            evt_key = event["data"]

            if not evt_key.startswith(prefix):
                continue

            session_id = evt_key[len(prefix) :]
            logger.info(f'Session "{session_id}" has expired')

            await terminator.force_logout(session_id)

        except CancelledError:
            logger.info("Session expiry task cancelled!")
            break

        except TimeoutError:
            await sleep(TASK_SLEEP_INTERVAL_SECONDS)

        except Exception as ex:
            logger.error(f"Session expiry task error occurred with: {ex}")
            rch = None
            await sleep(TASK_SLEEP_INTERVAL_SECONDS)

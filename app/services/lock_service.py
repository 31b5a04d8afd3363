import uuid
from contextlib import contextmanager

import redis
from redis.exceptions import RedisError
from tenacity import retry, stop_after_attempt, wait_fixed, retry_if_result

from app.domain.errors import ConcurrentModification, StorageError
from app.utils.retry import redis_retry
from app.utils.settings import REDIS_URL, CART_LOCK_TTL_SECONDS, CART_LOCK_WAIT_ATTEMPTS
from app.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje atomowo przez lua, skrypt dziala jako jedna nieprzerywalna operacja
#nie mozna wcisnac sie miedzy GET a DEL, wiec tu jest get + porownanie + del wszystko naraz


class LockService:
    """
    -per-user lock na koszyk (linearyzacja add/remove/clear/finalize)
    -zwalnianie locka tylko przez wlasciciela tokenu
    -atomowosc przy pomocy lua
    """

    def __init__(
        self,
        url: str | None = None,
        ttl: int = CART_LOCK_TTL_SECONDS,
        wait_attempts: int = CART_LOCK_WAIT_ATTEMPTS,
    ):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl
        self.wait_attempts = wait_attempts

    @staticmethod
    def _key(user_id: int) -> str:
        return f"cart:user:{user_id}:lock"

    @redis_retry()
    def acquire_user_lock(self, user_id: int, token: str) -> bool:
        key = self._key(user_id)
        logger.debug(f"Acquire lock {key}")
        #SET cart:user:1:lock "<token>" NX EX 10
        return bool(
            self.redis.set(
                name=key,
                value=token,
                nx=True, #not eXists, jesli klucz jest to nic nie rob i None
                ex=self.ttl, #lock wygasa sam jesli proces padnie
            )
        )

    @redis_retry()
    def release_user_lock(self, user_id: int, token: str) -> bool:
        key = self._key(user_id)
        logger.debug(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    def _wait_for_lock(self, user_id: int, token: str) -> bool:
        attempt = retry(
            stop=stop_after_attempt(self.wait_attempts),
            wait=wait_fixed(0.05),
            retry=retry_if_result(lambda acquired: acquired is False),
            retry_error_callback=lambda state: False,
        )(self.acquire_user_lock)
        return attempt(user_id, token)

    @contextmanager
    def user_lock(self, user_id: int):
        token = uuid.uuid4().hex
        try:
            acquired = self._wait_for_lock(user_id, token)
        except RedisError as e:
            raise StorageError(f"Lock backend unavailable: {e}") from e

        if not acquired:
            logger.warning(f"Could not lock cart of user {user_id}")
            raise ConcurrentModification()

        try:
            yield
        finally:
            try:
                self.release_user_lock(user_id, token)
            except RedisError as e:
                #lock i tak wygasnie po ttl
                logger.warning(f"Failed to release cart lock of user {user_id}: {e}")

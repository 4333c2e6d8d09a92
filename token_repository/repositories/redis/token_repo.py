"""
Token Repository Redis Implementation

Stores authentication tokens in Redis.
Uses Redis native TTL for expiry and MULTI/EXEC transactions for
read-then-mutate operations.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from token_repository.common.codec import CodecError, JsonTokenCodec, TokenCodec
from token_repository.common.errors import (
    ExpiredTokenError,
    TokenIntegrityError,
    TransportError,
)
from token_repository.common.time import ttl_seconds, utc_now
from token_repository.config import DEFAULT_KEY_PREFIX, RepositoryConfig, get_settings
from token_repository.db.redis import create_redis_client, verify_connection
from token_repository.domain.proxy import TokenProxy, derive_proxy
from token_repository.domain.token import AuthenticationToken
from token_repository.repositories.token_repo import TokenRepository

logger = logging.getLogger(__name__)


class RedisTokenRepository(TokenRepository):
    """
    Token Repository Redis Implementation

    Every operation is a single round trip. Tokens are never cached in
    process; Redis removes them when their TTL runs out.

    close() should be called when the repository is no longer needed, or
    the repository can be used as an async context manager.
    """

    def __init__(
        self,
        client: Redis,
        codec: Optional[TokenCodec] = None,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        operation_timeout: Optional[float] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize Repository

        Args:
            client: Async Redis client created with decode_responses=False.
                The repository takes ownership and closes it in close().
            codec: Codec for proxies and tokens (JSON by default)
            key_prefix: Namespace prepended to every key
            operation_timeout: Default deadline for each operation in seconds
                (None leaves only the client's socket timeout)
            clock: Source of the current UTC time
        """
        self.client = client
        self.codec = codec or JsonTokenCodec()
        self.key_prefix = key_prefix.encode("utf-8")
        self.operation_timeout = operation_timeout
        self._clock = clock
        self._closed = False

    @classmethod
    async def connect(
        cls,
        config: Optional[RepositoryConfig] = None,
        **kwargs: Any,
    ) -> "RedisTokenRepository":
        """
        Connect to Redis and create a repository

        Args:
            config: Single instance or sentinel configuration. When omitted,
                the configuration, key prefix and operation timeout are
                read from Settings.
            **kwargs: Forwarded to the constructor

        Returns:
            RedisTokenRepository: A repository owning a verified client

        Raises:
            TransportError: If Redis does not answer PING
        """
        if config is None:
            settings = get_settings()
            config = settings.repository_config()
            kwargs.setdefault("key_prefix", settings.TOKEN_KEY_PREFIX)
            kwargs.setdefault("operation_timeout", settings.OPERATION_TIMEOUT)

        client = create_redis_client(config)
        try:
            await verify_connection(client)
        except TransportError:
            await client.aclose()
            raise
        return cls(client, **kwargs)

    async def insert(
        self, token: AuthenticationToken, *, timeout: Optional[float] = None
    ) -> TokenProxy:
        now = self._clock()
        self._check_token_expiry(token, now)

        proxy = derive_proxy(token.entity_type, token.token_type)
        key = self._key(proxy)
        value = self._encode(token)
        ttl = ttl_seconds(token.expiry, now)

        await self._execute("insert", lambda: self.client.set(key, value, ex=ttl), timeout)

        logger.debug(
            f"Inserted token: proxy={proxy.id}, entity_type={proxy.entity_type}, "
            f"token_type={proxy.token_type}, ttl={ttl}s"
        )
        return proxy

    async def get(
        self, proxy: TokenProxy, *, timeout: Optional[float] = None
    ) -> Optional[AuthenticationToken]:
        key = self._key(proxy)

        raw = await self._execute("get", lambda: self.client.get(key), timeout)

        logger.debug(f"Get token: proxy={proxy.id}, found={raw is not None}")
        return self._decode(proxy, raw)

    async def update(
        self,
        proxy: TokenProxy,
        token: AuthenticationToken,
        *,
        timeout: Optional[float] = None,
    ) -> Optional[AuthenticationToken]:
        now = self._clock()
        self._check_token_expiry(token, now)

        key = self._key(proxy)
        value = self._encode(token)
        ttl = ttl_seconds(token.expiry, now)

        async def transaction() -> Optional[bytes]:
            async with self.client.pipeline(transaction=True) as pipe:
                # XX: only overwrite an existing key
                pipe.get(key)
                pipe.set(key, value, ex=ttl, xx=True)
                old_value, _ = await pipe.execute()
            return old_value

        old_value = await self._execute("update", transaction, timeout)

        logger.debug(
            f"Updated token: proxy={proxy.id}, existed={old_value is not None}, ttl={ttl}s"
        )
        return self._decode(proxy, old_value)

    async def remove(
        self, proxy: TokenProxy, *, timeout: Optional[float] = None
    ) -> Optional[AuthenticationToken]:
        key = self._key(proxy)

        async def transaction() -> Optional[bytes]:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.get(key)
                pipe.delete(key)
                old_value, _ = await pipe.execute()
            return old_value

        old_value = await self._execute("remove", transaction, timeout)

        logger.debug(f"Removed token: proxy={proxy.id}, existed={old_value is not None}")
        return self._decode(proxy, old_value)

    async def close(self) -> None:
        """
        Shut down the repository

        Releases the client's connection pool. Calling close() again has no effect.
        """
        if self._closed:
            logger.warning("Token repository already closed")
            return

        self._closed = True
        await self.client.aclose()
        logger.info("Token repository closed")

    @property
    def closed(self) -> bool:
        return self._closed

    async def _execute(
        self,
        operation: str,
        command: Callable[[], Awaitable[Any]],
        timeout: Optional[float],
    ) -> Any:
        """Run one Redis round trip, translating failures into TransportError"""
        if self._closed:
            raise TransportError(
                "Token repository is closed",
                code="repository_closed",
                details={"operation": operation},
            )

        deadline = self.operation_timeout if timeout is None else timeout
        try:
            if deadline is None:
                return await command()
            return await asyncio.wait_for(command(), deadline)
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"Redis {operation} timed out after {deadline}s",
                code="timeout",
                details={"operation": operation},
            ) from e
        except RedisError as e:
            raise TransportError(
                f"Redis {operation} failed: {e}",
                details={"operation": operation},
            ) from e

    def _check_token_expiry(self, token: AuthenticationToken, now: datetime) -> None:
        if token.has_expired(now):
            raise ExpiredTokenError(
                details={"expiry": token.expiry.isoformat(), "now": now.isoformat()}
            )

    def _key(self, proxy: TokenProxy) -> bytes:
        try:
            return self.key_prefix + self.codec.encode(proxy)
        except CodecError as e:
            raise TokenIntegrityError(f"Cannot encode token proxy: {e}", code="encode_failed") from e

    def _encode(self, token: AuthenticationToken) -> bytes:
        try:
            return self.codec.encode(token)
        except CodecError as e:
            raise TokenIntegrityError(f"Cannot encode token: {e}", code="encode_failed") from e

    def _decode(self, proxy: TokenProxy, raw: Optional[bytes]) -> Optional[AuthenticationToken]:
        if raw is None:
            return None

        try:
            token = self.codec.decode(raw, AuthenticationToken)
        except CodecError as e:
            logger.error(f"Stored token is corrupt: proxy={proxy.id}")
            raise TokenIntegrityError(
                f"Cannot decode stored token: {e}",
                code="decode_failed",
                details={"proxy": str(proxy.id)},
            ) from e

        if not proxy.matches(token.entity_type, token.token_type):
            logger.error(f"Stored token does not match its proxy: proxy={proxy.id}")
            raise TokenIntegrityError(
                "Stored token classification does not match the proxy",
                code="classification_mismatch",
                details={
                    "proxy": str(proxy.id),
                    "expected": [proxy.entity_type, proxy.token_type],
                    "actual": [token.entity_type, token.token_type],
                },
            )
        return token

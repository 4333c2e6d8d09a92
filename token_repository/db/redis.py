"""
Redis Connection Management Module

Builds pooled async Redis clients for a single instance or for a
sentinel-monitored master.
"""

import logging
import warnings

from redis.asyncio import Redis
from redis.asyncio.retry import Retry
from redis.asyncio.sentinel import Sentinel
from redis.backoff import NoBackoff
from redis.exceptions import RedisError

from token_repository.common.errors import ConfigurationError, TransportError
from token_repository.config import RedisConfig, RedisSentinelConfig, RepositoryConfig

logger = logging.getLogger(__name__)

_LOCAL_HOSTS = ("localhost", "127.0.0.1", "::1")


def _no_retry() -> Retry:
    """Retry policy that sends each command once"""
    return Retry(NoBackoff(), 0)


def _check_redis_security(host: str, password: str | None) -> None:
    """
    Check Redis connection security.

    Warns if there is no password and the host is not a localhost connection.
    """
    if not password and host not in _LOCAL_HOSTS:
        warnings.warn(
            "SECURITY WARNING: Redis connection has no password and is not connecting to localhost. "
            "This is insecure for production environments.",
            UserWarning,
            stacklevel=3,
        )
        logger.warning(
            "Redis connection without password to non-localhost host detected. "
            "Consider adding password authentication for production."
        )


def _create_single_client(config: RedisConfig) -> Redis:
    _check_redis_security(config.host, config.password)
    client = Redis(
        host=config.host,
        port=config.port,
        db=config.database,
        password=config.password,
        socket_timeout=config.timeout,
        socket_connect_timeout=config.timeout,
        max_connections=config.max_connections,
        decode_responses=False,
        retry=_no_retry(),
    )
    logger.info(f"Redis client created: {config.host}:{config.port}/{config.database}")
    return client


def _create_sentinel_client(config: RedisSentinelConfig) -> Redis:
    for address in config.hosts_and_ports:
        _check_redis_security(address.host, config.password)

    connection_kwargs = {
        "db": config.database,
        "password": config.password,
        "socket_timeout": config.timeout,
        "socket_connect_timeout": config.timeout,
        "decode_responses": False,
        "retry": _no_retry(),
    }
    if config.max_connections is not None:
        connection_kwargs["max_connections"] = config.max_connections

    sentinel = Sentinel(
        [(address.host, address.port) for address in config.hosts_and_ports],
        sentinel_kwargs={
            "socket_timeout": config.timeout,
            "socket_connect_timeout": config.timeout,
            "retry": _no_retry(),
        },
        **connection_kwargs,
    )
    client = sentinel.master_for(config.master_name)
    logger.info(
        f"Redis sentinel client created: master={config.master_name}, "
        f"sentinels={len(config.hosts_and_ports)}, db={config.database}"
    )
    return client


def create_redis_client(config: RepositoryConfig) -> Redis:
    """
    Create Redis Client

    The client keeps raw bytes (decode_responses=False) because values are
    produced by the token codec.

    Args:
        config: Single instance or sentinel configuration

    Returns:
        Redis: Async Redis client backed by a connection pool

    Raises:
        ConfigurationError: If the configuration type is not supported
    """
    if isinstance(config, RedisSentinelConfig):
        return _create_sentinel_client(config)
    if isinstance(config, RedisConfig):
        return _create_single_client(config)
    raise ConfigurationError(f"Unsupported Redis configuration: {type(config).__name__}")


async def verify_connection(client: Redis) -> None:
    """
    Verify Connectivity

    Raises:
        TransportError: If Redis does not answer PING
    """
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        raise TransportError(f"Redis is not reachable: {e}", code="connection_failed") from e
    logger.info("Redis connection established")

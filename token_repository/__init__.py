"""
Redis Token Repository

Caches identity-service authentication tokens in Redis until they expire.
"""

from token_repository.common.errors import (
    ConfigurationError,
    ExpiredTokenError,
    TokenIntegrityError,
    TokenRepositoryError,
    TransportError,
    ValidationError,
)
from token_repository.config import HostAndPort, RedisConfig, RedisSentinelConfig
from token_repository.domain import (
    AuthenticationToken,
    EntityType,
    TokenProxy,
    TokenType,
    derive_proxy,
)
from token_repository.repositories import TokenRepository
from token_repository.repositories.redis import RedisTokenRepository

__version__ = "1.0.0"

__all__ = [
    "AuthenticationToken",
    "ConfigurationError",
    "EntityType",
    "ExpiredTokenError",
    "HostAndPort",
    "RedisConfig",
    "RedisSentinelConfig",
    "RedisTokenRepository",
    "TokenIntegrityError",
    "TokenProxy",
    "TokenRepository",
    "TokenRepositoryError",
    "TokenType",
    "TransportError",
    "ValidationError",
    "derive_proxy",
]

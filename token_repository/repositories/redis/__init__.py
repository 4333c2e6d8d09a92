"""
Redis Repository Implementation Module Initialization
"""

from token_repository.repositories.redis.token_repo import RedisTokenRepository

__all__ = [
    "RedisTokenRepository",
]

"""
Redis Connection Module Initialization
"""

from token_repository.db.redis import create_redis_client, verify_connection

__all__ = [
    "create_redis_client",
    "verify_connection",
]

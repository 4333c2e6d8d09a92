"""
Data Access Layer Module Initialization
"""

from token_repository.repositories.token_repo import TokenRepository

__all__ = [
    "TokenRepository",
]

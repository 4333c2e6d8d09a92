"""
Domain Model Module Initialization
"""

from token_repository.domain.proxy import TokenProxy, derive_proxy
from token_repository.domain.token import AuthenticationToken, EntityType, TokenType

__all__ = [
    "AuthenticationToken",
    "EntityType",
    "TokenType",
    "TokenProxy",
    "derive_proxy",
]

"""
Token Repository Interface

Defines the data access interface for cached authentication tokens.
"""

from abc import ABC, abstractmethod
from typing import Optional

from token_repository.domain.proxy import TokenProxy
from token_repository.domain.token import AuthenticationToken


class TokenRepository(ABC):
    """Token Repository Interface"""

    @abstractmethod
    async def insert(self, token: AuthenticationToken) -> TokenProxy:
        """
        Store a token until it expires

        Args:
            token: The token to store

        Returns:
            TokenProxy: A new proxy that retrieves the token

        Raises:
            ExpiredTokenError: If the token has already expired
        """
        pass

    @abstractmethod
    async def get(self, proxy: TokenProxy) -> Optional[AuthenticationToken]:
        """
        Get the token for a proxy

        Returns None if the proxy was never inserted, was removed, or the token expired.
        """
        pass

    @abstractmethod
    async def update(
        self, proxy: TokenProxy, token: AuthenticationToken
    ) -> Optional[AuthenticationToken]:
        """
        Replace the token for an existing proxy

        Does nothing if the proxy is not present.

        Args:
            proxy: The proxy returned by insert
            token: The replacement token

        Returns:
            The previous token, or None if the proxy was not present

        Raises:
            ExpiredTokenError: If the replacement token has already expired
        """
        pass

    @abstractmethod
    async def remove(self, proxy: TokenProxy) -> Optional[AuthenticationToken]:
        """
        Remove the token for a proxy

        Returns:
            The removed token, or None if the proxy was not present
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release resources held by the repository"""
        pass

    async def __aenter__(self) -> "TokenRepository":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

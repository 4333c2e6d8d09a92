"""
Token Proxy Domain Model

A token proxy is the opaque handle a caller keeps instead of the token
itself. It is scoped by the token's classification and carries a random
identity, so every insert gets its own key.
"""

from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TokenProxy(BaseModel):
    """Token Proxy Model"""

    entity_type: str = Field(..., min_length=1, description="Entity Type")
    token_type: str = Field(..., min_length=1, description="Token Type")
    id: UUID = Field(default_factory=uuid4, description="Proxy ID")

    model_config = ConfigDict(frozen=True)

    @field_validator("entity_type", "token_type", mode="before")
    @classmethod
    def _tag_value(cls, v):
        if isinstance(v, Enum):
            return v.value
        return v

    def matches(self, entity_type: str, token_type: str) -> bool:
        """Check whether the proxy was derived for the given classification."""
        return self.entity_type == entity_type and self.token_type == token_type


def derive_proxy(entity_type: str, token_type: str) -> TokenProxy:
    """
    Derive a fresh proxy for a token classification

    Args:
        entity_type: Entity kind of the token
        token_type: Credential kind of the token

    Returns:
        TokenProxy: A new proxy with a random identity

    Raises:
        ValueError: If either tag is empty
    """
    if isinstance(entity_type, Enum):
        entity_type = entity_type.value
    if isinstance(token_type, Enum):
        token_type = token_type.value
    if not entity_type or not token_type:
        raise ValueError("entity_type and token_type must be non-empty")
    return TokenProxy(entity_type=entity_type, token_type=token_type, id=uuid4())

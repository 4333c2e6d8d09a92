"""
Authentication Token Domain Model

Defines the credential record cached by the repository and the well-known
classification tags.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator

from token_repository.common.time import ensure_utc, utc_now


class EntityType(str, Enum):
    """
    Well-known entity kinds

    The set is open: any non-empty string is a valid entity type.
    """

    APPLICATION = "APP"
    USER = "USER"
    COMBINED = "COMBINED"
    DEVELOPER = "DEV"
    UNBOUND = "UNB"


class TokenType(str, Enum):
    """
    Well-known credential kinds

    The set is open: any non-empty string is a valid token type.
    """

    SIMPLE = "simple"
    HMAC_SHA1 = "hmac_sha1"


class AuthenticationToken(BaseModel):
    """Authentication Token Model"""

    # Entity kind the token authenticates (see EntityType)
    entity_type: str = Field(..., min_length=1, description="Entity Type")
    # Credential kind (see TokenType)
    token_type: str = Field(..., min_length=1, description="Token Type")
    # Absolute expiry instant
    expiry: datetime = Field(..., description="Expiry Time")
    # Token identifier
    id: str = Field(..., description="Token ID")
    # Token secret
    secret: str = Field(..., repr=False, description="Token Secret")
    # Instant from which the token may be refreshed
    refresh: datetime = Field(..., description="Refresh Time")

    model_config = ConfigDict(frozen=True)

    @field_validator("entity_type", "token_type", mode="before")
    @classmethod
    def _tag_value(cls, v):
        if isinstance(v, Enum):
            return v.value
        return v

    @field_validator("expiry", "refresh", mode="after")
    @classmethod
    def _instant_utc(cls, v: datetime) -> datetime:
        return cast(datetime, ensure_utc(v))

    def has_expired(self, now: Optional[datetime] = None) -> bool:
        """Return True when the expiry instant is not strictly after `now`."""
        reference = ensure_utc(now) if now is not None else utc_now()
        return self.expiry <= reference

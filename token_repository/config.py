"""
Configuration Management Module

Describes how to reach Redis, either a single instance or a set of
sentinels monitoring a named master. Settings can be read from
environment variables or a .env file.
"""

from functools import lru_cache
from typing import Optional, Union

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from token_repository.common.errors import ConfigurationError

# Default socket timeout (seconds)
DEFAULT_TIMEOUT = 2.0
# Namespace prepended to every stored key
DEFAULT_KEY_PREFIX = "hod:token:"


class RedisConfig(BaseModel):
    """Single Redis Instance Configuration"""

    # Redis host (required)
    host: str = Field(..., min_length=1, description="Redis Host")
    # Redis port (required)
    port: int = Field(..., gt=0, le=65535, description="Redis Port")
    # Omit if Redis has no password
    password: Optional[str] = Field(None, repr=False, description="Redis Password")
    # Logical database
    database: int = Field(0, ge=0, description="Redis Database")
    # Socket timeout (seconds)
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="Timeout")
    # Connection pool size (None means unbounded)
    max_connections: Optional[int] = Field(None, gt=0, description="Max Connections")


class HostAndPort(BaseModel):
    """Sentinel Address"""

    host: str = Field(..., min_length=1, description="Sentinel Host")
    port: int = Field(..., gt=0, le=65535, description="Sentinel Port")

    @classmethod
    def parse(cls, value: str) -> "HostAndPort":
        """Parse a "host:port" string"""
        host, sep, port = value.strip().rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ConfigurationError(
                f"Invalid sentinel address: {value!r}, expected host:port",
                details={"address": value},
            )
        return cls(host=host, port=int(port))


class RedisSentinelConfig(BaseModel):
    """Redis Sentinel Configuration"""

    # Addresses of each sentinel
    hosts_and_ports: list[HostAndPort] = Field(..., min_length=1, description="Sentinels")
    # Name of the monitored master
    master_name: str = Field(..., min_length=1, description="Master Name")
    # Omit if Redis has no password
    password: Optional[str] = Field(None, repr=False, description="Redis Password")
    # Logical database
    database: int = Field(0, ge=0, description="Redis Database")
    # Socket timeout (seconds)
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="Timeout")
    # Connection pool size (None means unbounded)
    max_connections: Optional[int] = Field(None, gt=0, description="Max Connections")


RepositoryConfig = Union[RedisConfig, RedisSentinelConfig]


class Settings(BaseSettings):
    """
    Application Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    """

    DEBUG: bool = False

    # Single instance
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379

    # Sentinels, comma-separated host:port list
    # Example: "sentinel-1:26379,sentinel-2:26379"
    # When set, REDIS_HOST and REDIS_PORT are ignored
    REDIS_SENTINELS: str = ""
    # Master name monitored by the sentinels (required with REDIS_SENTINELS)
    REDIS_SENTINEL_MASTER: Optional[str] = None

    REDIS_PASSWORD: Optional[str] = None
    REDIS_DATABASE: int = 0
    # Socket timeout (seconds)
    REDIS_TIMEOUT: float = DEFAULT_TIMEOUT
    REDIS_MAX_CONNECTIONS: Optional[int] = None

    # Namespace prepended to every stored key
    TOKEN_KEY_PREFIX: str = DEFAULT_KEY_PREFIX
    # Deadline for a whole repository operation (seconds, unset means socket timeout only)
    OPERATION_TIMEOUT: Optional[float] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    def sentinel_addresses(self) -> list[HostAndPort]:
        """Parse REDIS_SENTINELS"""
        return [
            HostAndPort.parse(item)
            for item in self.REDIS_SENTINELS.split(",")
            if item.strip()
        ]

    def repository_config(self) -> RepositoryConfig:
        """
        Build the connection configuration

        Returns:
            RedisSentinelConfig if sentinels are configured, RedisConfig otherwise

        Raises:
            ConfigurationError: If sentinels are configured without a master name
        """
        sentinels = self.sentinel_addresses()
        if sentinels:
            if not self.REDIS_SENTINEL_MASTER:
                raise ConfigurationError(
                    "REDIS_SENTINEL_MASTER is required when REDIS_SENTINELS is set"
                )
            return RedisSentinelConfig(
                hosts_and_ports=sentinels,
                master_name=self.REDIS_SENTINEL_MASTER,
                password=self.REDIS_PASSWORD,
                database=self.REDIS_DATABASE,
                timeout=self.REDIS_TIMEOUT,
                max_connections=self.REDIS_MAX_CONNECTIONS,
            )
        return RedisConfig(
            host=self.REDIS_HOST,
            port=self.REDIS_PORT,
            password=self.REDIS_PASSWORD,
            database=self.REDIS_DATABASE,
            timeout=self.REDIS_TIMEOUT,
            max_connections=self.REDIS_MAX_CONNECTIONS,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get application configuration (Singleton)

    Uses lru_cache to ensure configuration is loaded only once.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()

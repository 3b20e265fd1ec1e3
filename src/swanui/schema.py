"""Strict, versioned schema for swanui configuration files.

This module defines Pydantic models that enforce:
- Type safety and validation for all configuration fields
- Rejection of unknown fields (extra="forbid")
- Explicit locations for the swanctl binary and the charon VICI socket

Usage:
    from swanui.schema import SwanUIConfig

    config = SwanUIConfig.model_validate(yaml_dict)
"""

from __future__ import annotations

import ipaddress
import typing as t
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

SCHEMA_VERSION = 1


class LogLevel(str, Enum):
    """Accepted logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# ============================================================================
# Configuration Models (bottom-up)
# ============================================================================

class ServerConfig(BaseModel):
    """HTTP backend listener and static UI location."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    host: str = Field(default="0.0.0.0", description="Listen address")
    port: int = Field(default=8080, ge=1, le=65535, description="Listen port (1-65535)")
    static_dir: str = Field(default="./static", description="Directory served at '/'")

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        if v in ("localhost", ""):
            return v or "0.0.0.0"
        try:
            ipaddress.ip_address(v)
        except ValueError as e:
            raise ValueError(f"host must be an IP address or 'localhost': {e}")
        return v


class SwanctlConfig(BaseModel):
    """How the swanctl status tool is invoked."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    binary: str = Field(default="swanctl", min_length=1, description="swanctl executable name or path")
    timeout_seconds: float = Field(
        default=10,
        gt=0,
        le=300,
        description="Per-invocation timeout in seconds (0-300]"
    )


class ViciConfig(BaseModel):
    """Control channel to the charon daemon."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    socket_path: str = Field(
        default="/var/run/charon.vici",
        min_length=1,
        description="Path of the charon VICI UNIX socket"
    )
    timeout_seconds: float = Field(
        default=10,
        gt=0,
        le=300,
        description="Socket connect/read timeout in seconds (0-300]"
    )


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: LogLevel = Field(default=LogLevel.INFO)

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v: t.Any) -> t.Any:
        return v.upper() if isinstance(v, str) else v


class SwanUIConfig(BaseModel):
    """Root configuration model."""
    model_config = ConfigDict(extra="forbid")

    version: int = Field(default=SCHEMA_VERSION, description="Schema version")
    server: ServerConfig = Field(default_factory=ServerConfig)
    swanctl: SwanctlConfig = Field(default_factory=SwanctlConfig)
    vici: ViciConfig = Field(default_factory=ViciConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: int) -> int:
        if v != SCHEMA_VERSION:
            raise ValueError(
                f"Unsupported config version {v}; this release understands version {SCHEMA_VERSION}"
            )
        return v


# ============================================================================
# Public API
# ============================================================================

def validate_config(config_dict: dict) -> SwanUIConfig:
    """Validate a configuration dictionary against the schema.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return SwanUIConfig.model_validate(config_dict)

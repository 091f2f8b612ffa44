"""Server configuration for NorthStar.

Loads configuration from environment variables with sensible defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from northstar.workspace import data_root


def _port_from_env(name: str, default: str) -> int:
    port_str = os.getenv(name, default)
    try:
        port = int(port_str)
        if not 1 <= port <= 65535:
            raise ValueError(f"Port must be between 1 and 65535, got {port}")
    except ValueError as e:
        raise ValueError(f"Invalid {name} value '{port_str}': {e}") from e
    return port


@dataclass
class Config:
    """Application configuration."""

    data_root: Path
    api_port: int
    mcp_port: int
    read_only: bool

    @classmethod
    def from_env(cls, read_only_override: bool | None = None) -> Config:
        """Load configuration from environment variables.

        Args:
            read_only_override: If provided, overrides the NORTHSTAR_READ_ONLY env var.
        """
        if read_only_override is not None:
            read_only = read_only_override
        else:
            read_only = os.getenv("NORTHSTAR_READ_ONLY", "").lower() in ("1", "true", "yes")

        return cls(
            data_root=data_root(),
            api_port=_port_from_env("NORTHSTAR_API_PORT", "3000"),
            mcp_port=_port_from_env("NORTHSTAR_MCP_PORT", "8080"),
            read_only=read_only,
        )

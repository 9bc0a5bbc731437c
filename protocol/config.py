import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .constants import DEFAULT_CLIENT_PACKET_LIMIT, DEFAULT_READ_CHUNK_SIZE, DEFAULT_SERVER_PACKET_LIMIT

ENV_PREFIX = "SKIRMISH_"

class ProtocolConfig(BaseModel):
    """Per-connection decode settings."""
    server_packet_limit: Optional[int] = Field(default=DEFAULT_SERVER_PACKET_LIMIT, gt=0)
    client_packet_limit: Optional[int] = Field(default=DEFAULT_CLIENT_PACKET_LIMIT, gt=0)
    read_chunk_size: int = Field(default=DEFAULT_READ_CHUNK_SIZE, gt=0)

def load_config() -> ProtocolConfig:
    """Build the config from SKIRMISH_* environment variables.

    Unset variables keep their defaults; "none" turns a packet limit off.
    Bad values raise pydantic.ValidationError.
    """
    overrides: Dict[str, Any] = {}
    for name in ProtocolConfig.model_fields:
        value = os.getenv(ENV_PREFIX + name.upper())
        if value is None:
            continue
        if name.endswith("_limit") and value.strip().lower() == "none":
            overrides[name] = None
        else:
            overrides[name] = value.strip()
    return ProtocolConfig(**overrides)

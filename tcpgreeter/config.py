from typing import Optional

from pydantic import BaseModel, Field, ValidationError

REPLY = b"Hello, MOZERFOKER!\n"


class ConfigError(ValueError):
    """Raised when listener settings fail validation (bad port, bad read size)."""


class ListenerConfig(BaseModel):
    port: int = Field(..., ge=0, le=65535, description="0 = let the OS pick a free port")
    host: Optional[str] = Field(None, description="Bind address; None binds all interfaces")
    reply: bytes = REPLY
    read_size: int = Field(4096, ge=1)
    log_path: Optional[str] = None

    @classmethod
    def from_port(cls, value, allow_ephemeral: bool = True, **overrides) -> "ListenerConfig":
        try:
            cfg = cls(port=value, **overrides)
        except ValidationError as e:
            raise ConfigError(f"invalid listener settings for port {value!r}: {e.errors()[0]['msg']}") from e
        if cfg.port == 0 and not allow_ephemeral:
            raise ConfigError(f"invalid listener settings for port {value!r}: port must be between 1 and 65535")
        return cfg

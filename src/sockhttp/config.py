import os
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from . import __version__

ENV_PREFIX = "SOCKHTTP_"


class ClientConfig(BaseModel):
    """Per-client settings. Nothing here is process-wide."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    connect_timeout: float = Field(default=10.0, gt=0)
    read_timeout: float | None = Field(default=None, gt=0)
    tls_min_version: Literal["TLSv1.2", "TLSv1.3"] = "TLSv1.2"
    verify_certificate: bool = True
    ca_file: str | None = None
    write_buffer_size: int = Field(default=8192, ge=1024, le=1024 * 1024)
    default_user_agent: str = f"sockhttp/{__version__}"
    # Extra writes attempted after a zero-byte write on a writable channel.
    write_retries: int = Field(default=1, ge=0)

    @property
    def effective_read_timeout(self) -> float:
        if self.read_timeout is None:
            return self.connect_timeout
        return self.read_timeout

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides) -> "ClientConfig":
        """Builds a config from SOCKHTTP_* variables, e.g. SOCKHTTP_CONNECT_TIMEOUT=5."""
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = raw
        values.update(overrides)
        return cls.model_validate(values)

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .target import Target, parse_base_url


DEFAULT_TIMEOUT = 5.0
DEFAULT_MAX_RESPONSE_SIZE = 8192


@dataclass(frozen=True)
class ClientConfig:
    """
    Connection settings shared by every request a client makes.

    The default headers are copied into a read-only mapping, so a config can be
    shared between threads without locking.
    """
    base_url: str
    timeout: float = DEFAULT_TIMEOUT
    default_headers: Mapping[str, str] = field(default_factory=dict)
    max_response_size: int = DEFAULT_MAX_RESPONSE_SIZE
    read_until_complete: bool = False
    target: Target = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.max_response_size <= 0:
            raise ValueError(f"max_response_size must be positive, got {self.max_response_size}")

        object.__setattr__(self, "default_headers", MappingProxyType(dict(self.default_headers)))
        object.__setattr__(self, "target", parse_base_url(self.base_url))

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Protocol

class HttpMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"

@dataclass
class HttpRequest:
    method: str | HttpMethod = HttpMethod.GET
    path: str = "/"
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None

    @property
    def method_name(self) -> str:
        if isinstance(self.method, HttpMethod):
            return self.method.value
        return self.method

@dataclass(frozen=True)
class HttpResponse:
    status: str
    status_code: int
    headers: dict[str, str]
    body: bytes

class HttpProtocol(Protocol):
    def perform_request(
        self,
        method: str,
        path: str,
        host: str,
        headers: list[tuple[str, str]],
        body: bytes | None,
    ) -> HttpResponse:
        ...

from dataclasses import dataclass
from urllib.parse import urlsplit

from .errors import UrlParseError


DEFAULT_PORT = 80


@dataclass(frozen=True)
class Target:
    scheme: str
    host: str
    port: int = DEFAULT_PORT
    path: str = ""

    @property
    def host_header(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port == DEFAULT_PORT:
            return host
        return f"{host}:{self.port}"


def parse_base_url(url: str) -> Target:
    """
    Splits a base URL into scheme, host, port and path.

    Only plain http is supported. A URL without a scheme is read as http.
    The path is kept on the Target but is not prefixed to request paths.
    """
    if "://" not in url:
        url = f"http://{url}"

    parts = urlsplit(url)
    if parts.scheme != "http":
        raise UrlParseError(f"Unsupported URL scheme '{parts.scheme}', only http is supported.")

    if not parts.hostname:
        raise UrlParseError(f"Missing hostname in URL '{url}'")

    try:
        port = parts.port or DEFAULT_PORT
    except ValueError as e:
        raise UrlParseError(f"Invalid port in URL '{url}'") from e

    return Target(scheme=parts.scheme, host=parts.hostname, port=port, path=parts.path)

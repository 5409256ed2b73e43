import logging
from typing import Any, Callable, Mapping

from .config import ClientConfig
from .http1_protocol import Http1Protocol, encode_body, merge_headers, normalize_path
from .http_protocol import HttpMethod, HttpRequest, HttpResponse
from .tcp_transport import TcpTransport
from .transport import Transport


logger = logging.getLogger(__name__)


class HttpClient:
    """
    Issues one HTTP/1.1 request per connection against the configured host.

    Every call opens a fresh transport, writes the request, performs the
    response read and closes the transport again, whatever the outcome.
    """

    def __init__(self, config: ClientConfig, transport_factory: Callable[[], Transport] = TcpTransport):
        self._config = config
        self._transport_factory = transport_factory

    @property
    def config(self) -> ClientConfig:
        return self._config

    def request(self, request: HttpRequest) -> HttpResponse:
        config = self._config
        target = config.target

        method = request.method_name
        path = normalize_path(request.path)
        body = encode_body(request.body)
        headers = merge_headers(config.default_headers, request.headers)

        transport = self._transport_factory()
        try:
            transport.connect(target.host, target.port, config.timeout)
            protocol = Http1Protocol(
                transport,
                max_response_size=config.max_response_size,
                read_until_complete=config.read_until_complete,
            )
            response = protocol.perform_request(method, path, target.host_header, headers, body)
        finally:
            transport.close()

        logger.debug("%s %s -> %d", method, path, response.status_code)
        return response

    def get(self, path: str, headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self.request(HttpRequest(HttpMethod.GET, path, headers or {}))

    def post(self, path: str, body: Any = None, headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self.request(HttpRequest(HttpMethod.POST, path, headers or {}, body))

    def put(self, path: str, body: Any = None, headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self.request(HttpRequest(HttpMethod.PUT, path, headers or {}, body))

    def patch(self, path: str, body: Any = None, headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self.request(HttpRequest(HttpMethod.PATCH, path, headers or {}, body))

    def delete(self, path: str, headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self.request(HttpRequest(HttpMethod.DELETE, path, headers or {}))

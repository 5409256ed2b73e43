import json
import logging
from typing import Any, Mapping

from .transport import Transport
from .http_protocol import HttpProtocol, HttpResponse
from .config import DEFAULT_MAX_RESPONSE_SIZE
from .errors import (
    ConnectionClosedError,
    InvalidRequestError,
    MalformedResponseError,
    MalformedStatusLineError,
    SerializationError,
)


logger = logging.getLogger(__name__)

HEADER_SEPARATOR = b"\r\n\r\n"
LINE_SEPARATOR = "\r\n"
HEADER_NAME_SEPARATOR = ": "

# Framing headers the codec writes itself.
MANAGED_HEADERS = frozenset({"host", "content-length", "connection"})


# --- Serialization ---

def encode_body(body: Any) -> bytes | None:
    if body is None:
        return None

    try:
        encoded = json.dumps(body, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError, RecursionError) as e:
        raise SerializationError(f"Request body is not JSON serializable: {e}") from e

    return encoded.encode("utf-8")


def normalize_path(path: str) -> str:
    if not path.startswith("/"):
        return "/" + path
    return path


def merge_headers(defaults: Mapping[str, str], overrides: Mapping[str, str]) -> list[tuple[str, str]]:
    """
    Merges default and per-request headers into one ordered list.

    Names are matched case-insensitively. An override keeps the position of
    the header it replaces but takes its own name casing and value. Managed
    framing headers are dropped from both sources. A name or value holding CR
    or LF would split the header line, so it is rejected.
    """
    merged: dict[str, tuple[str, str]] = {}

    for source in (defaults, overrides):
        for name, value in source.items():
            if any(c in "\r\n" for c in name + value):
                raise InvalidRequestError(f"Header '{name}' contains a line break.")

            key = name.lower()
            if key in MANAGED_HEADERS:
                logger.debug("Dropping caller-supplied '%s' header, it is set by the codec", name)
                continue
            merged[key] = (name, value)

    return list(merged.values())


def build_request(
    method: str,
    path: str,
    host: str,
    headers: list[tuple[str, str]],
    body: bytes | None,
) -> bytes:
    buffer = bytearray()

    buffer += f"{method} {path} HTTP/1.1\r\n".encode("utf-8")
    buffer += f"Host: {host}\r\n".encode("utf-8")

    for key, value in headers:
        buffer += f"{key}: {value}\r\n".encode("utf-8")

    if body is not None:
        buffer += f"Content-Length: {len(body)}\r\n".encode("ascii")

    buffer += b"Connection: close\r\n"
    buffer += b"\r\n"

    if body is not None:
        buffer += body

    return bytes(buffer)


# --- Parsing ---

def parse_status_line(line: str) -> tuple[str, int]:
    """
    Returns the "{version} {code}" status string and the integer status code.
    The reason phrase, if any, is dropped. The code must be plain ASCII digits;
    a leading sign such as "+200" is rejected even though int() would take it.
    """
    parts = line.split(" ", 2)
    if len(parts) < 2:
        raise MalformedStatusLineError(f"malformed status line: {line!r}")

    version, code = parts[0], parts[1]
    if not (code.isascii() and code.isdigit()):
        raise MalformedStatusLineError(f"invalid status code in status line: {line!r}")

    return f"{version} {code}", int(code)


def parse_headers(block: str) -> dict[str, str]:
    headers: dict[str, str] = {}

    for line in block.split(LINE_SEPARATOR):
        if not line:
            continue

        name, separator, value = line.partition(HEADER_NAME_SEPARATOR)
        if not separator or not name:
            continue

        headers[name] = value

    return headers


def parse_response(raw: bytes) -> HttpResponse:
    head, separator, body = raw.partition(HEADER_SEPARATOR)
    if not separator:
        raise MalformedResponseError("malformed HTTP response")

    # Same codec as build_request; surrogateescape keeps invalid bytes instead of failing.
    status_line, separator, header_block = head.decode("utf-8", "surrogateescape").partition(LINE_SEPARATOR)
    if not separator:
        raise MalformedResponseError("malformed HTTP response headers")

    status, status_code = parse_status_line(status_line)

    return HttpResponse(
        status=status,
        status_code=status_code,
        headers=parse_headers(header_block),
        body=body,
    )


def find_content_length(head: bytes) -> int | None:
    """Returns the last declared Content-Length, matching parse_headers."""
    content_length = None

    for line in head.split(b"\r\n")[1:]:
        name, separator, value = line.partition(b":")
        if separator and name.strip().lower() == b"content-length":
            try:
                content_length = int(value.strip())
            except ValueError as e:
                raise MalformedResponseError("Invalid Content-Length value") from e
            if content_length < 0:
                raise MalformedResponseError("Invalid Content-Length value")

    return content_length


class Http1Protocol(HttpProtocol):
    def __init__(
        self,
        transport: Transport,
        max_response_size: int = DEFAULT_MAX_RESPONSE_SIZE,
        read_until_complete: bool = False,
    ):
        self._transport: Transport = transport
        self._max_response_size: int = max_response_size
        self._read_until_complete: bool = read_until_complete

    def perform_request(
        self,
        method: str,
        path: str,
        host: str,
        headers: list[tuple[str, str]],
        body: bytes | None,
    ) -> HttpResponse:
        payload = build_request(method, path, host, headers, body)
        self._transport.write(payload)
        logger.debug("Sent %s %s to %s (%d bytes)", method, path, host, len(payload))

        raw = self._read_response()
        logger.debug("Received %d bytes from %s", len(raw), host)

        return parse_response(raw)

    def _read_response(self) -> bytes:
        buffer = bytearray(self._max_response_size)

        with memoryview(buffer) as view:
            received = self._transport.read_into(view)
            if received == 0:
                raise ConnectionClosedError("Connection closed before any response bytes were received.")

            if self._read_until_complete:
                received = self._read_remaining(buffer, view, received)

        if received == len(buffer):
            logger.debug("Response filled the %d byte read buffer and may be truncated", len(buffer))

        return bytes(buffer[:received])

    def _read_remaining(self, buffer: bytearray, view: memoryview, received: int) -> int:
        header_size = 0
        content_length = None

        while received < len(buffer):
            if header_size == 0:
                separator_pos = buffer.find(HEADER_SEPARATOR, 0, received)
                if separator_pos != -1:
                    header_size = separator_pos + len(HEADER_SEPARATOR)
                    content_length = find_content_length(bytes(buffer[:separator_pos]))

            if content_length is not None and received >= header_size + content_length:
                break

            bytes_read = self._transport.read_into(view[received:])
            if bytes_read == 0:
                break
            received += bytes_read

        return received

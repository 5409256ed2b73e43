class WireHttpError(Exception):
    """Base exception for the wirehttp library."""
    pass


class SerializationError(WireHttpError):
    """The request body could not be encoded to bytes."""
    pass

# --- Transport Errors ---

class TransportError(WireHttpError):
    """A generic error occurred in the transport layer."""
    pass

class DnsFailureError(TransportError): pass
class SocketConnectError(TransportError): pass
class ConnectTimeoutError(SocketConnectError): pass
class SocketWriteError(TransportError): pass
class SocketReadError(TransportError): pass
class ConnectionClosedError(TransportError): pass

# --- HTTP Client Errors ---

class HttpClientError(WireHttpError):
    """A generic error occurred in the HTTP client logic."""
    pass

class UrlParseError(HttpClientError): pass

class MalformedResponseError(HttpClientError):
    """The response bytes do not frame a valid HTTP/1.1 message."""
    pass

class MalformedStatusLineError(MalformedResponseError): pass
class InvalidRequestError(HttpClientError): pass

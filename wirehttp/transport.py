from typing import Protocol

class Transport(Protocol):
    def connect(self, host: str, port: int, timeout: float) -> None:
        ...

    def write(self, data: bytes) -> None:
        ...

    def read_into(self, buffer: bytearray | memoryview) -> int:
        ...

    def close(self) -> None:
        ...

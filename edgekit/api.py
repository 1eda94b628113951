"""High-level device API: virtual pin writes, properties, events and metadata."""

from __future__ import annotations

from typing import Protocol

from .param import Param


class RpcClient(Protocol):
    """The calls :class:`Api` forwards to; payloads are raw encoded bytes."""

    def virtual_write(self, pin: int, data: bytes) -> object: ...

    def begin_group(self, timestamp: int) -> object: ...

    def end_group(self) -> object: ...

    def sync_all(self) -> object: ...

    def sync_virtual(self, data: bytes) -> object: ...

    def set_property(self, pin: int, prop: str, data: bytes) -> object: ...

    def log_event(self, event_name: str, description: str) -> object: ...

    def resolve_event(self, event_name: str) -> object: ...

    def resolve_all_events(self, event_name: str) -> object: ...

    def set_metadata(self, field_name: str, value: str) -> object: ...


def _payload(param: Param) -> bytes:
    """The encoded values without the final terminating NUL."""
    return param.buffer[:-1]


def encode_values(*args: object) -> bytes:
    """Encode values as NUL-separated text, without a trailing NUL."""
    param = Param()
    param.add_multi(*args)
    return _payload(param)


def _encode(args: tuple[object, ...]) -> bytes:
    if len(args) == 1 and isinstance(args[0], Param):
        return _payload(args[0])
    return encode_values(*args)


class Api:
    """Encodes values and hands them to an RPC client."""

    def __init__(self, rpc: RpcClient) -> None:
        self._rpc = rpc

    @property
    def rpc(self) -> RpcClient:
        return self._rpc

    def virtual_write(self, pin: int, *args: object) -> None:
        """Send values (or one prepared :class:`Param`) to a virtual pin."""
        self._rpc.virtual_write(pin, _encode(args))

    def virtual_write_binary(self, pin: int, data: bytes) -> None:
        """Send raw bytes to a virtual pin."""
        self._rpc.virtual_write(pin, bytes(data))

    def begin_group(self, timestamp: int = 0) -> None:
        self._rpc.begin_group(timestamp)

    def end_group(self) -> None:
        self._rpc.end_group()

    def sync_all(self) -> None:
        """Ask the server to re-send the current values of all widgets."""
        self._rpc.sync_all()

    def sync_virtual(self, *args: object) -> None:
        """Ask for the current values of the given virtual pins."""
        self._rpc.sync_virtual(_encode(args))

    def set_property(self, pin: int, prop: str, *args: object) -> None:
        """Set a widget property such as "label" or "color"."""
        self._rpc.set_property(pin, prop, _encode(args))

    def log_event(self, event_name: str, description: str = "") -> None:
        self._rpc.log_event(event_name, description)

    def resolve_event(self, event_name: str) -> None:
        self._rpc.resolve_event(event_name)

    def resolve_all_events(self, event_name: str) -> None:
        self._rpc.resolve_all_events(event_name)

    def set_metadata(self, field_name: str, value: str) -> None:
        self._rpc.set_metadata(field_name, value)
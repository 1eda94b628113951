"""Packed parameter lists: NUL-separated values in a bounded byte buffer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

_INT_PREFIX = re.compile(rb"\s*[+-]?\d+")
_FLOAT_PREFIX = re.compile(
    rb"\s*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def _atoi(raw: bytes) -> int:
    """Parse a leading integer the way C ``atoi`` does; 0 when there is none."""
    match = _INT_PREFIX.match(raw)
    return int(match.group()) if match else 0


def _atof(raw: bytes) -> float:
    """Parse a leading float the way C ``atof`` does; 0.0 when there is none."""
    match = _FLOAT_PREFIX.match(raw)
    return float(match.group()) if match else 0.0


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class ParamItem:
    """One value of a :class:`Param`, or an invalid marker when ``data`` is None."""

    data: bytes | None = None

    def as_str(self) -> str | None:
        return None if self.data is None else _decode(self.data)

    def as_int(self) -> int:
        return 0 if self.data is None else _atoi(self.data)

    def as_float(self) -> float:
        return 0.0 if self.data is None else _atof(self.data)

    def is_valid(self) -> bool:
        return self.data is not None

    def is_empty(self) -> bool:
        return not self.data

    def __int__(self) -> int:
        return self.as_int()

    def __float__(self) -> float:
        return self.as_float()

    def __str__(self) -> str:
        return self.as_str() or ""


INVALID = ParamItem()


class Param:
    """A list of values, each stored as text followed by a NUL byte.

    ``capacity`` bounds the buffer size; values that do not fit are dropped.
    ``None`` means no bound.
    """

    def __init__(self, data: bytes = b"", capacity: int | None = None) -> None:
        if capacity is not None and len(data) > capacity:
            raise ValueError("initial data exceeds capacity")
        self._buf = bytearray(data)
        self._capacity = capacity

    @property
    def buffer(self) -> bytes:
        return bytes(self._buf)

    @property
    def capacity(self) -> int | None:
        return self._capacity

    def _head(self) -> bytes:
        end = self._buf.find(0)
        return bytes(self._buf if end < 0 else self._buf[:end])

    def as_str(self) -> str:
        return _decode(self._head())

    def as_int(self) -> int:
        return _atoi(self._head())

    def as_float(self) -> float:
        return _atof(self._head())

    def is_empty(self) -> bool:
        return not self._buf or self._buf[0] == 0

    def _spans(self) -> Iterator[tuple[int, int, int]]:
        """Yield (start, end of text, end including the NUL) for each value."""
        size = len(self._buf)
        pos = 0
        while pos < size:
            end = self._buf.find(0, pos)
            if end < 0:
                yield pos, size, size
                return
            yield pos, end, end + 1
            pos = end + 1

    def __iter__(self) -> Iterator[ParamItem]:
        for start, end, _ in self._spans():
            yield ParamItem(bytes(self._buf[start:end]))

    def __getitem__(self, key: int | str) -> ParamItem:
        if isinstance(key, str):
            wanted = key.encode("utf-8")
            items = iter(self)
            for name in items:
                value = next(items, INVALID)
                if name.data == wanted:
                    return value
            return INVALID
        if isinstance(key, int):
            if key < 0:
                return INVALID
            for index, item in enumerate(self):
                if index == key:
                    return item
            return INVALID
        raise TypeError(f"unsupported key type: {type(key).__name__}")

    def __len__(self) -> int:
        return len(self._buf)

    def clear(self) -> None:
        self._buf.clear()

    def add_raw(self, data: bytes) -> None:
        """Append bytes as they are; dropped whole if they do not fit."""
        if self._capacity is not None and len(self._buf) + len(data) > self._capacity:
            return
        self._buf += data

    def add(self, value: object) -> None:
        """Append one value, formatted as text and NUL-terminated."""
        if value is None:
            text = b""
        elif isinstance(value, str):
            text = value.encode("utf-8")
        elif isinstance(value, (bytes, bytearray)):
            text = bytes(value)
        elif isinstance(value, int):
            text = f"{value:d}".encode("ascii")
        elif isinstance(value, float):
            text = f"{value:.7f}".encode("ascii")
        else:
            raise TypeError(f"unsupported value type: {type(value).__name__}")
        self.add_raw(text + b"\0")

    def add_multi(self, *args: object) -> None:
        for value in args:
            self.add(value)

    def add_key(self, key: str, value: object) -> None:
        self.add(key)
        self.add(value)

    def remove_key(self, key: str) -> None:
        """Remove every key/value pair whose key equals ``key``."""
        wanted = key.encode("utf-8")
        spans = self._spans()
        doomed: list[tuple[int, int]] = []
        for start, end, stop in spans:
            value = next(spans, None)
            if bytes(self._buf[start:end]) == wanted:
                doomed.append((start, value[2] if value else stop))
        for start, stop in reversed(doomed):
            del self._buf[start:stop]

    def __repr__(self) -> str:
        return f"Param({self.buffer!r}, capacity={self._capacity!r})"
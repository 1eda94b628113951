"""Widgets that write to virtual pins: change-only writers, LCD and map."""

from __future__ import annotations

import math
from typing import Generic, TypeVar

from .api import Api
from .param import Param

T = TypeVar("T")


class VPinWriteOnChange(Generic[T]):
    """Writes a value to a virtual pin only when it differs from the last one."""

    def __init__(self, api: Api, pin: int) -> None:
        self._api = api
        self._pin = pin
        self._value: T | None = None
        self._has_value = False

    @property
    def pin(self) -> int:
        return self._pin

    @property
    def value(self) -> T | None:
        return self._value

    def reset(self) -> None:
        self._has_value = False

    def has_value(self) -> bool:
        return self._has_value

    def set(self, value: T) -> None:
        """Remember a value without sending it."""
        self._value = value
        self._has_value = True

    def update(self, value: T) -> None:
        """Remember and send the value if it is new or changed."""
        if not self._has_value or value != self._value:
            self.set(value)
            self.report()

    def report(self) -> None:
        """Send the remembered value, if any."""
        if self._has_value:
            self._api.virtual_write(self._pin, self._value)


class FloatVPinWriteOnChange:
    """Writes a float to a virtual pin when it moves more than ``threshold``."""

    def __init__(self, api: Api, pin: int, threshold: float) -> None:
        self._api = api
        self._pin = pin
        self._threshold = threshold
        self._value = math.nan

    @property
    def pin(self) -> int:
        return self._pin

    @property
    def value(self) -> float:
        return self._value

    def reset(self) -> None:
        self._value = math.nan

    def has_value(self) -> bool:
        return not math.isnan(self._value)

    def set(self, value: float) -> None:
        self._value = float(value)

    def update(self, value: float) -> None:
        if not self.has_value() or abs(value - self._value) > self._threshold:
            self.set(value)
            self.report()

    def report(self) -> None:
        if self.has_value():
            self._api.virtual_write(self._pin, self._value)


class LcdWidget:
    """A text display addressed by column and row."""

    def __init__(self, api: Api, pin: int) -> None:
        self._api = api
        self._pin = pin

    def clear(self) -> None:
        self._api.virtual_write(self._pin, "clr")

    def print(self, x: int, y: int, text: object) -> None:
        """Show ``text`` starting at column ``x`` of row ``y``."""
        cmd = Param()
        cmd.add_multi("p", x, y, text)
        self._api.virtual_write(self._pin, cmd)


class MapWidget:
    """A map showing indexed points."""

    def __init__(self, api: Api, pin: int) -> None:
        self._api = api
        self._pin = pin

    def clear(self) -> None:
        self._api.virtual_write(self._pin, "clr")

    def location(self, index: object, lat: object, lon: object, value: object) -> None:
        self._api.virtual_write(self._pin, index, lat, lon, value)
"""Persistent device configuration: packed record, pre-provisioning and storage."""

from __future__ import annotations

import dataclasses
import logging
import os
import struct
from dataclasses import dataclass
from enum import IntEnum, IntFlag
from pathlib import Path

from .param import Param

log = logging.getLogger(__name__)

MAGIC = 0x626C6E6B
DEFAULT_FIRMWARE_VERSION = "0.0.0"
DEFAULT_SERVER = "blynk.cloud"
DEFAULT_PORT = 443
_BLNKOPT_MARKER = b"blnkopt\0"

_FORMAT = struct.Struct("<I15sB34s64s34s34sHIIIIIi")

# Sizes of the fixed character fields, terminating NUL included.
_TEXT_FIELDS = {
    "version": 15,
    "wifi_ssid": 34,
    "wifi_pass": 64,
    "cloud_token": 34,
    "cloud_host": 34,
}


class ConfigFlag(IntFlag):
    VALID = 0x01
    STATIC_IP = 0x02


class ProvisioningError(IntEnum):
    NONE = 0
    CONFIG = 700
    NETWORK = 701
    CLOUD = 702
    TOKEN = 703
    INTERNAL = 704


def _fit(text: str, size: int) -> str:
    """Truncate text so its encoding fits a field of ``size`` bytes with a NUL."""
    return text.encode("utf-8")[: size - 1].decode("utf-8", errors="ignore")


def _unpack_text(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


@dataclass
class ConfigStore:
    """The stored configuration record; text fields are bounded like the packed form."""

    magic: int = MAGIC
    version: str = DEFAULT_FIRMWARE_VERSION
    flags: int = 0
    wifi_ssid: str = ""
    wifi_pass: str = ""
    cloud_token: str = "invalid token"
    cloud_host: str = DEFAULT_SERVER
    cloud_port: int = DEFAULT_PORT
    static_ip: int = 0
    static_mask: int = 0
    static_gw: int = 0
    static_dns: int = 0
    static_dns2: int = 0
    last_error: int = ProvisioningError.NONE

    def __setattr__(self, name: str, value: object) -> None:
        size = _TEXT_FIELDS.get(name)
        if size is not None:
            value = _fit(str(value), size)
        elif name == "cloud_port":
            value = int(value) & 0xFFFF
        super().__setattr__(name, value)

    @classmethod
    def default(cls, firmware_version: str = DEFAULT_FIRMWARE_VERSION) -> ConfigStore:
        return cls(version=firmware_version)

    def set_flag(self, mask: int, value: bool) -> None:
        if value:
            self.flags |= mask
        else:
            self.flags &= ~mask & 0xFF

    def get_flag(self, mask: int) -> bool:
        return (self.flags & mask) == mask

    def to_bytes(self) -> bytes:
        return _FORMAT.pack(
            self.magic,
            self.version.encode("utf-8"),
            self.flags,
            self.wifi_ssid.encode("utf-8"),
            self.wifi_pass.encode("utf-8"),
            self.cloud_token.encode("utf-8"),
            self.cloud_host.encode("utf-8"),
            self.cloud_port,
            self.static_ip,
            self.static_mask,
            self.static_gw,
            self.static_dns,
            self.static_dns2,
            self.last_error,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> ConfigStore:
        if len(data) != _FORMAT.size:
            raise ValueError(f"expected {_FORMAT.size} bytes, got {len(data)}")
        (magic, version, flags, ssid, password, token, host, port,
         ip, mask, gw, dns, dns2, last_error) = _FORMAT.unpack(data)
        return cls(
            magic=magic,
            version=_unpack_text(version),
            flags=flags,
            wifi_ssid=_unpack_text(ssid),
            wifi_pass=_unpack_text(password),
            cloud_token=_unpack_text(token),
            cloud_host=_unpack_text(host),
            cloud_port=port,
            static_ip=ip,
            static_mask=mask,
            static_gw=gw,
            static_dns=dns,
            static_dns2=dns2,
            last_error=last_error,
        )


def parse_blnkopt(
    data: bytes, firmware_version: str = DEFAULT_FIRMWARE_VERSION
) -> ConfigStore | None:
    """Read a pre-provisioning block of key/value pairs.

    Returns a configuration built on the defaults, or None when the block
    lacks an SSID or an auth token.
    """
    if data.startswith(_BLNKOPT_MARKER):
        data = data[len(_BLNKOPT_MARKER):]
    prov = Param(data)
    ssid = prov["ssid"]
    password = prov["pass"]
    auth = prov["auth"]
    host = prov["host"]
    port = prov["port"]

    if not (ssid.is_valid() and auth.is_valid()):
        return None

    store = ConfigStore.default(firmware_version)
    store.wifi_ssid = ssid.as_str() or ""
    store.cloud_token = auth.as_str() or ""
    if password.is_valid():
        store.wifi_pass = password.as_str() or ""
    if host.is_valid():
        store.cloud_host = host.as_str() or ""
    if port.is_valid():
        store.cloud_port = port.as_int()
    return store


class ConfigManager:
    """Keeps the current configuration and persists it to a file."""

    def __init__(
        self, path: str | os.PathLike[str], firmware_version: str = DEFAULT_FIRMWARE_VERSION
    ) -> None:
        self._path = Path(path)
        self._firmware_version = firmware_version
        self.store = ConfigStore.default(firmware_version)

    @property
    def path(self) -> Path:
        return self._path

    def _default(self) -> ConfigStore:
        return ConfigStore.default(self._firmware_version)

    def load(self) -> ConfigStore:
        """Load the stored record, falling back to defaults when it is absent or invalid."""
        try:
            store = ConfigStore.from_bytes(self._path.read_bytes())
        except (OSError, ValueError):
            store = None
        if store is None or store.magic != MAGIC:
            log.debug("Using default config.")
            store = self._default()
        self.store = store
        return store

    def save(self) -> None:
        """Write the current record; raises OSError when it cannot be stored."""
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_bytes(self.store.to_bytes())
        os.replace(tmp, self._path)
        log.debug("Configuration stored")

    def reset(self) -> None:
        """Replace the configuration with defaults and store it."""
        log.debug("Resetting configuration!")
        self.store = self._default()
        self.save()

    def set_last_error(self, error: int) -> None:
        """Record a provisioning error, but only while not yet provisioned."""
        if self.store.get_flag(ConfigFlag.VALID):
            return
        self.store = self._default()
        self.store.last_error = int(error)
        log.info("Last error code: %s", int(error))
        self.save()
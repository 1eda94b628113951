"""Formatting helpers for diagnostic log lines."""

from __future__ import annotations

from typing import Iterable, Sequence


def dump_bytes(data: bytes) -> str:
    """Render bytes with printable characters as-is and others as bracketed hex."""
    parts: list[str] = []
    prev_print = True
    for byte in data:
        if 32 < byte < 127:
            if not prev_print:
                parts.append("]")
            parts.append(chr(byte))
            prev_print = True
        else:
            parts.append("[" if prev_print else "|")
            parts.append(f"{byte:02x}")
            prev_print = False
    if not prev_print:
        parts.append("]")
    return "".join(parts)


def log_prefix(millis: int) -> str:
    """Timestamp prefix placed before every log line."""
    return f"[{millis}] "


def format_ip(octets: Sequence[int], reverse: bool = False) -> str:
    """Dotted form of a four-octet address, optionally in reverse order."""
    ordered: Iterable[int] = reversed(octets[:4]) if reverse else octets[:4]
    return ".".join(str(octet) for octet in ordered)


def format_log(millis: int, *args: object) -> str:
    """A full log line: timestamp prefix followed by all arguments."""
    return log_prefix(millis) + "".join(str(arg) for arg in args)
"""Command-line options for connecting a device client."""

from __future__ import annotations

import getopt
import sys
from dataclasses import dataclass
from typing import Sequence

from .param import ParamItem

DEFAULT_SERVER = "blynk.cloud"
DEFAULT_PORT = 80


@dataclass(frozen=True)
class Options:
    token: str
    server: str
    port: int


def usage(default_server: str = DEFAULT_SERVER, default_port: int = DEFAULT_PORT) -> str:
    """The help text shown on bad or missing options."""
    return (
        "Usage: blynk [options]\n"
        "\n"
        "Options:\n"
        "  -t auth, --token=auth    Your auth token\n"
        f"  -s addr, --server=addr   Server name (default: {default_server})\n"
        f"  -p num,  --port=num      Server port (default: {default_port})\n"
        "\n"
    )


def parse_options(
    argv: Sequence[str] | None = None,
    default_server: str = DEFAULT_SERVER,
    default_port: int = DEFAULT_PORT,
) -> Options:
    """Parse arguments; print usage and exit with status 1 when they are invalid."""
    args = list(sys.argv[1:] if argv is None else argv)
    text = usage(default_server, default_port)
    try:
        opts, _ = getopt.gnu_getopt(args, "t:s:p:", ["token=", "server=", "port="])
    except getopt.GetoptError:
        print(text, end="")
        raise SystemExit(1) from None

    token: str | None = None
    server = default_server
    port = default_port
    for name, value in opts:
        if name in ("-t", "--token"):
            token = value
        elif name in ("-s", "--server"):
            server = value
        elif name in ("-p", "--port"):
            port = ParamItem(value.encode("utf-8")).as_int() & 0xFFFF

    if token is None:
        print(text, end="")
        raise SystemExit(1)
    return Options(token=token, server=server, port=port)
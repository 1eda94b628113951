"""Building blocks for cloud-connected devices: wire parameters, timers, virtual-pin widgets, board settings and provisioning configuration."""

__version__ = "0.1.0"
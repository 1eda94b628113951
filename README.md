# edgekit

Building blocks for the software side of a cloud-connected device: the
value lists it sends over virtual pins, polled timers for periodic jobs,
small widgets that write to virtual pins, per-board settings, and the
configuration record and helpers used while provisioning a device over
Wi-Fi.

The package has no runtime dependencies beyond the standard library.

## Modules

| Module | Contents |
| --- | --- |
| `edgekit.param` | `Param` and `ParamItem`: NUL-separated values in an optionally bounded buffer, with `as_str`, `as_int`, `as_float`, lookup by index or by key, `add`, `add_multi`, `add_key`, `add_raw` and `remove_key`. |
| `edgekit.debug` | `log_prefix`, `format_log`, `format_ip` and `dump_bytes` for readable log lines and byte dumps. |
| `edgekit.timer` | `Timer` and `TimerHandle`: a fixed table of interval, timeout and run-N-times callbacks driven by calling `Timer.run()`. |
| `edgekit.api` | `Api` and `encode_values`: virtual-pin writes, grouping, syncing, widget properties, events and metadata, handed to an RPC object you supply. |
| `edgekit.widgets` | `VPinWriteOnChange`, `FloatVPinWriteOnChange`, `LcdWidget` and `MapWidget`. |
| `edgekit.options` | `parse_options`, `usage` and `Options`: `-t/--token`, `-s/--server` and `-p/--port` arguments. |
| `edgekit.settings` | `BoardSettings` and `board_settings`: pins, LED and timing options for named boards. |
| `edgekit.configstore` | `ConfigStore`, `ConfigFlag`, `ProvisioningError`, `parse_blnkopt` and `ConfigManager`: the packed configuration record, pre-provisioning blocks and file storage. |
| `edgekit.configmode` | `encode_unique_part`, `wifi_name`, `hostname`, `mac_to_string`, `WifiAuth`, `wifi_sec_to_str`, `Network`, `apply_config`, `board_info_json` and `wifi_scan_json`. |

## Examples

### Parameter lists

```python
from edgekit.param import Param

p = Param(capacity=64)
p.add_key("ssid", "home")
p.add_key("port", 443)
print(p["ssid"].as_str())   # home
print(p["port"].as_int())   # 443
p.remove_key("ssid")
print(p.buffer)             # b'port\x00443\x00'
```

A value that would not fit within `capacity` is dropped whole.

### Scheduling jobs

`Timer` does nothing by itself: call `run()` from your loop. The clock is
any callable returning milliseconds; it defaults to a monotonic clock.

```python
import time
from edgekit.timer import Timer

timer = Timer(max_timers=16)
handle = timer.set_interval(1000, lambda: print("tick"))
timer.set_timeout(5000, handle.delete_timer)

while timer.num_timers():
    timer.run()
    time.sleep(0.01)
```

Setting up a timer when every slot is taken returns an invalid handle, on
which every operation does nothing.

### Writing to virtual pins

`Api` encodes the values and passes the bytes to any object that has the
methods listed in `edgekit.api.RpcClient` (`virtual_write`, `sync_virtual`,
`set_property`, `log_event` and so on).

```python
from edgekit.api import Api, encode_values
from edgekit.widgets import FloatVPinWriteOnChange, LcdWidget

class PrintingRpc:
    def virtual_write(self, pin, data):
        print(pin, data)

api = Api(PrintingRpc())
api.virtual_write(5, 1, "on")          # 5 b'1\x00on'

temperature = FloatVPinWriteOnChange(api, 6, threshold=0.5)
temperature.update(21.0)               # sent
temperature.update(21.2)               # within threshold, not sent

LcdWidget(api, 7).print(0, 1, "hello") # 7 b'p\x000\x001\x00hello'

print(encode_values(1, "x"))           # b'1\x00x'
```

### Command-line options

```python
from edgekit.options import parse_options

opts = parse_options(["--token", "token", "--port", "8080"])
print(opts.server, opts.port)          # blynk.cloud 8080
```

A missing token or an unknown option prints the usage text and raises
`SystemExit(1)`.

### Configuration storage

```python
from edgekit.configstore import ConfigFlag, ConfigManager

manager = ConfigManager("device.cfg", firmware_version="1.0.0")
store = manager.load()                 # defaults when the file is absent or invalid
store.wifi_ssid = "home"
store.set_flag(ConfigFlag.VALID, True)
manager.save()
```

Text fields are truncated to the sizes of the packed record;
`ConfigStore.to_bytes()` and `ConfigStore.from_bytes()` convert the record
to and from its fixed binary layout.

### Provisioning helpers

```python
from edgekit.configmode import Network, hostname, mac_to_string, wifi_name, wifi_scan_json
from edgekit.settings import board_settings

name = wifi_name("Thermostat", 12345)
print(hostname(name))
print(mac_to_string([0x02, 0, 0, 0, 0, 0x01]))   # 02:00:00:00:00:01
print(wifi_scan_json([Network("home", "02:00:00:00:00:02", -60, 3, 6)]))
print(board_settings("wio_terminal").led_pin)     # LED_BUILTIN
```

`apply_config` takes the fields of a submitted setup form and returns the
HTTP status, the JSON reply and the resulting `ConfigStore`.

### Debug output

```python
from edgekit.debug import dump_bytes, format_ip

print(dump_bytes(b"vw\x001\x00"))     # vw[00]1[00]
print(format_ip([192, 168, 4, 1]))    # 192.168.4.1
```

## What the package does not do

edgekit does not open network connections or speak the cloud protocol:
`Api` only hands encoded bytes to the RPC object you provide. It has no
main loop or provisioning state machine, runs no setup web or DNS server,
and does not drive LEDs, buttons or other hardware. It installs no
command; `parse_options` is for use in your own program.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.
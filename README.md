# armcore

`armcore` holds the host-side logic of a six-joint robot arm controller as plain
Python: CRC8/CRC16 checksums, remote-control frame decoding, a byte ring buffer,
CAN transmit headers, PWM compare limits, a wrapping cycle-counter clock, a PID
controller with fuzzy gain scheduling, feed-forward and observer blocks, device
timeout monitoring, a text-command servo bus and USB CDC descriptors. Everything is
computation over bytes and numbers; hardware access is left to the caller.

## Installation

```
pip install armcore
```

Python 3.10 or later, no runtime dependencies. To run the tests, install
`pip install "armcore[test]"` and run `pytest`.

## Modules

| Module | Purpose |
| --- | --- |
| `armcore.crc` | `crc8`, `verify_crc8`, `append_crc8`, `crc16`, `verify_crc16`, `append_crc16` |
| `armcore.remote` | `RemoteControl.update(frame)` decodes an 18-byte remote frame into sticks, wheel, switches, mouse and keys |
| `armcore.bytefifo` | `ByteFifo`, a fixed-capacity byte ring buffer raising `FifoFullError` / `FifoEmptyError` |
| `armcore.can_frame` | `TxHeader`, `dlc_for_length`, `build_tx_header` for standard-id data frames |
| `armcore.pwm` | `PwmTimer.set_pwm(channel, value)` clamps a compare value to the timer period |
| `armcore.dwt` | `CycleClock`, `Stopwatch` and `SysTime` over a wrapping 32-bit cycle counter |
| `armcore.fuzzy_pid` | `PID` with `Improvement` flags, the `FuzzyRule` gain scheduler and `PidError` |
| `armcore.observers` | `Feedforward`, `DisturbanceObserver`, `TrackingDifferentiator` |
| `armcore.detect` | `DetectMonitor` and `DeviceStatus` for offline and data-error detection |
| `armcore.servo` | `ServoBus` sends text commands to bus servos and parses angle replies |
| `armcore.usb_descriptors` | Device, language-id, BOS, string and serial-number descriptors |

## Examples

Append a CRC16 to a frame and check it:

```python
from armcore.crc import append_crc16, verify_crc16

frame = append_crc16(b"\xa5\x1e\x00\x00\x00\x00\x00")
assert verify_crc16(frame)
```

Buffer bytes in a ring:

```python
from armcore.bytefifo import ByteFifo

fifo = ByteFifo(8)
assert fifo.puts(b"hello") == 5
assert fifo.gets(5) == b"hello"
assert fifo.is_empty()
```

Run a PID update with a fixed time step:

```python
from armcore.fuzzy_pid import PID

pid = PID(max_out=10, integral_limit=5, deadband=0, kp=1, ki=0, kd=0,
          dt_source=lambda: 0.01)
assert pid.calculate(0.0, 1.0) == 1.0
```

Watch devices for timeouts:

```python
from armcore.detect import DetectMonitor

monitor = DetectMonitor(now=0)
assert monitor.scan(50) == 0      # the remote receiver has the highest priority
assert monitor.is_lost(0)
```

Talk to bus servos through any byte-writing callable:

```python
from armcore.servo import ServoBus

sent = []
bus = ServoBus(sent.append, sleep=lambda s: None)
bus.request_angle(1)              # writes b"#001PRAD!"
bus.feed(b"#001P1234!")
assert bus.parse_angles() == [1]
assert bus.get_angle(1) == 1234
```

Build the serial-number string descriptor from three unique-id words:

```python
from armcore.usb_descriptors import serial_descriptor

descriptor = serial_descriptor(0x11111111, 0x22222222, 0x00000001)
assert descriptor[0] == 0x1A
```

## Timing

`PID`, `FuzzyRule`, `Feedforward`, `DisturbanceObserver` and
`TrackingDifferentiator` take a `dt_source`: a callable returning the seconds since
the previous update. Left out, it is a `Stopwatch` lap on a `CycleClock` driven by
the host's performance counter. Pass a constant such as `lambda: 0.001` for
repeatable runs. `CycleClock` also accepts its own `counter` callable.

## What it does not do

`armcore` opens no serial ports, CAN interfaces or USB devices, runs no task
scheduler and has no command-line program. It does not build or parse the framed
serial messages that carry the CRCs; callers assemble those bytes themselves and
use `armcore.crc` to checksum them.
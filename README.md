# netbench

Building blocks for measuring network throughput, using only the standard library.

| Module | What it gives you |
| --- | --- |
| `netbench.units` | `unit_atof`, `unit_atof_rate`, `unit_atoi` to read sizes such as `"1M"` or `"0.5k"`, and `unit_format` to print byte and bit counts as `"1.00 MByte"` or `"34.4 Gbit"`. |
| `netbench.timer` | `TimerQueue`, a sorted queue of one-shot and periodic `Timer`s that your own loop polls, and `now_usecs()`. |
| `netbench.settings` | The `Settings` dataclass with `validate()`, the `Mode` and `DebugLevel` enums, and the default values and limits (`DEFAULT_PORT`, `MAX_STREAMS`, `MAX_UDP_BLOCKSIZE`, ...). |
| `netbench.sockets` | `create_socket`, `netdial`, `netannounce`, `timeout_connect`, `close_socket`, `set_nonblocking`, `get_sock_domain`, `would_block`, `format_fdset`, and the `NetError` exceptions. |
| `netbench.netio` | `nread`, `nread_no_select`, `wait_read`, `nwrite`, `wait_write`, `wait_socket_readable`, `has_sendfile` and `nsendfile`. |
| `netbench.byteorder` | `hton64` / `ntoh64` for 64-bit network byte order, and `flowinfo_label` / `flowinfo_priority` for IPv6 flow-info words. |
| `netbench.tcpinfo` | `read_tcpinfo` and the `TcpInfo` snapshot of the kernel's `TCP_INFO` statistics, with `has_tcpinfo()` to check for support. |

## Installation

```
pip install .
```

## Units

```python
from netbench.units import unit_atoi, unit_atof_rate, unit_format

unit_atoi("4G")                # 4294967296
unit_atof_rate("10M")          # 10000000.0
unit_format(1024.0, "A", -1)   # "1.00 KByte"
unit_format(1000.0, "k", -1)   # "8.00 Kbit"
```

`unit_atof` and `unit_atoi` use powers of 1024, `unit_atof_rate` powers of 1000; the
suffix letter may be upper or lower case. In `unit_format`, upper-case letters
(`B K M G T A`) print bytes and lower-case ones print bits; `A`/`a` choose the unit
from the size of the number. A precision of `-1` keeps the number to about four
characters; any other value is the number of decimal places.

## Timers

```python
from netbench.timer import TimerQueue

queue = TimerQueue()
queue.create(lambda data, now: print("tick", data), 1_000_000, True, "stats", 0)

queue.timeout(0)           # 1.0 seconds until the next timer (capped at one second)
queue.run(1_000_000)       # prints "tick stats" and reschedules it for 2_000_000
queue.destroy()
```

Times are microseconds. Every method that takes `now` reads the monotonic clock
through `now_usecs()` when it is `None`. `run` fires every due timer in order,
reschedules periodic ones and drops one-shot ones; `reset` restarts a timer from
`now`, `cancel` removes it.

## Settings

```python
from netbench.settings import Settings

Settings(blksize=128 * 1024, tos=0x10).validate()
Settings(mss=100_000).validate()   # ValueError: mss must be between 0 and 9216, ...
```

## Sockets and I/O

```python
import socket
from netbench.sockets import netdial
from netbench.netio import nwrite, nread

sock = netdial(socket.AF_UNSPEC, socket.SOCK_STREAM, None, None, 0, "localhost", 5201, 5000)
nwrite(sock, b"payload")
reply = nread(sock, 7)
```

`netannounce` opens a bound socket (and listens, for stream sockets); with
`AF_UNSPEC` and no local address it makes an IPv6 socket that also accepts IPv4.
Failures while moving data are raised as `NetSoftError` (transient), `NetHardError`
or `NetHangup` (peer closed); all three subclass `NetError`, itself an `OSError`.

## TCP statistics

```python
from netbench.tcpinfo import has_tcpinfo, read_tcpinfo

if has_tcpinfo():
    info = read_tcpinfo(sock)
    info.rtt_usecs(), info.snd_cwnd_bytes(), info.total_retransmits()
    print(info.message())
```

`TCP_INFO` is read on Linux only; elsewhere `read_tcpinfo` raises `OSError`.
`TcpInfo.from_bytes` decodes a raw buffer, so the statistics can also be parsed
from data obtained some other way.

## What it does not do

netbench is a library of parts. It has no command-line program, no client or server
that runs a complete throughput test, no control protocol between the two ends, no
UDP or SCTP test streams, no JSON reports and no authentication. You put those
together yourself from the pieces above.

## Running the tests

```
pip install .[test]
pytest
```
# sampletools

A small collection of tools:

- **Q8_0 quantised dot products** (blocks of 32 signed 8-bit values with a
  half-precision scale) and half-precision vector dot products, built on numpy
  (`sampletools.quant`);
- an **aiohttp WebSocket chat handler** with unique user names and broadcast
  messages (`sampletools.chat`);
- **streamed uploads** that write a body into a single file inside an uploads
  directory, refusing unsafe names (`sampletools.uploads`);
- a tiny **task command** with a `chat` subcommand (`sampletools.xtask`).

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Quantised dot products

```python
from sampletools.quant import (
    gen_rand_block_q8_0_vec,
    vec_dot_q8,
    vec_dot_q8_naive,
)

x = gen_rand_block_q8_0_vec(4)
y = gen_rand_block_q8_0_vec(4)

exact = vec_dot_q8_naive(128, x, y)   # 128 elements = 4 blocks of 32
fast = vec_dot_q8(x, y)
assert abs(exact - fast) < 1e-2
```

Each `BlockQ8_0` holds a half-precision scale `d` and 32 signed 8-bit
quants `qs`; constructing one with the wrong number of quants, or quants
outside -128..127, raises `ValueError`. The scale is rounded to half
precision.

- `vec_dot_q8_naive(n, x, y)` and `vec_dot_q8_stdsimd(n, x, y)` use the first
  `n // 32` blocks of each vector.
- `vec_dot_q8_paired(a, b)` uses every block, accumulating two at a time; both
  vectors must hold the same number of blocks.
- `vec_dot_q8(x, y)` uses every block of `x` with a single accumulator.
- `vec_dot_f16(x, y)` is the dot product of two half-precision vectors,
  accumulated in single precision.

The building blocks are public too: `mul_sum_i8_pairs(x, y)` multiplies 32
signed byte pairs and sums each run of four into 8 float lanes,
`hsum_float_8(x)` adds 8 floats horizontally, and `bytes_from_nibbles_32(data)`
unpacks 16 bytes into 32 values in 0..15 (low nibbles first, then high).

`gen_rand_block_q8_0()`, `gen_rand_block_q8_0_vec(n)` and
`gen_rand_block_f16(n)` make random test data.

## WebSocket chat

`websocket_handler` is an aiohttp request handler. The first text message a
client sends is its user name; if the name is already in use the client is told
`Username already taken.` and the connection closes. Otherwise everyone
connected sees `<name> joined.`, each later message is broadcast as
`<name>: <text>`, and `<name> left.` is sent when the client goes away, after
which the name is free again.

The handler reads its shared `ChatState` from the application under
`CHAT_STATE_KEY`:

```python
from aiohttp import web

from sampletools.chat import CHAT_STATE_KEY, ChatState, websocket_handler

app = web.Application()
app[CHAT_STATE_KEY] = ChatState()
app.router.add_get("/ws", websocket_handler)
web.run_app(app, host="127.0.0.1", port=8080)
```

`ChatState.claim_username(name)` and `ChatState.release_username(name)` can
also be used directly.

## Streamed uploads

```python
from sampletools.uploads import UploadError, path_is_valid, stream_to_file

path_is_valid("report.txt")   # True
path_is_valid("../x")         # False
path_is_valid("/etc/passwd")  # False

written = await stream_to_file("report.txt", [b"hello ", b"world"], directory="uploads")
```

`stream_to_file` accepts either a synchronous or an asynchronous iterable of
byte chunks and returns the path of the file it wrote. The directory must
already exist. It raises `UploadError` with `status` 400 (`Invalid path`) for
a name that is not a single plain path component, and with status 500 when the
chunks cannot be read or the file cannot be written.

## The task command

```
sampletools-xtask chat --prompt "hello"
```

prints the prompt with no trailing newline. The `chat` subcommand also accepts
`-u/--user-id`, `-s/--session-id` (both whole numbers in 0..4294967295) and
`-m/--mode`; by default the ids are `0`, the mode is `cmd` and the prompt is
`system`. `-V/--version` prints the version.

## What is not included

The package does not ship a ready-to-run web server or a command that starts
one. There are no routes for server-sent events, path parameters, JSON bodies,
multipart forms or form validation, and no serving of static files; the chat
handler and the upload helpers above must be wired into an aiohttp application
of your own.
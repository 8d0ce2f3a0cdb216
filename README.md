# lanxfer

Send a file or a whole directory tree to another machine on your local
network. One side runs a receiver that listens on a TCP port and saves
whatever arrives. The other side sends a path to that receiver's address.
While file content is sent, the sender reports progress and average speed.

The package has no dependencies outside the standard library.

## Install

```
pip install .
```

## Command line

Start a receiver on the target machine:

```
lanxfer receive --dir incoming --port 8000
```

- `--dir` is the directory to save into. It is created if missing. The
  default is the current directory.
- `--host` is the address to listen on. The default is `0.0.0.0`.
- `--port` is the port to listen on. The default is `8000`.

The receiver handles each connection on its own thread. It prints one line
for each connection and each received file. It runs until you interrupt it
with Ctrl-C, then prints `Stop server`. If it cannot listen, it prints
`Failed to start server : ...` and exits with status 1.

Send a file or directory from the other machine:

```
lanxfer send photos --ip 192.168.1.20 --port 8000
```

- `--ip` must be a valid IPv4 or IPv6 address. The default is `127.0.0.1`.
- `--port` must be a number from 0 to 65535. The default is `8000`.

If either value is not valid, the command reports the problem and stops.

While sending:

- Progress lines such as `42% 1.50MB/s` go to standard error.
- Log lines go to standard output.
- The connection attempt times out after 3 seconds.
- When the transfer is done, the command prints `Time taken : ...` and then
  `Send over`.
- On any failure it prints `Send failed : ...` and exits with status 1.

## Library use

```python
from pathlib import Path
from lanxfer.sender import handle_send, total_size

print(total_size(Path("photos")))     # bytes in all files at or below the path
handle_send(("192.168.1.20", 8000), Path("photos"), print, print)
```

In `handle_send`:

- The third argument is called with each log message.
- The fourth argument is called with `(percent, speed)`, where `speed` is a
  string such as `"1.50MB/s"`.

```python
import threading
from pathlib import Path
from lanxfer.receiver import handle_receive

running = threading.Event()
running.set()
handle_receive(("0.0.0.0", 8000), Path("incoming"), print, running)
```

`handle_receive` returns shortly after `running` is cleared.

Other modules:

- **`lanxfer.protocol`** provides `SendProtocol` and `ReceiveProtocol` for any
  binary stream. It raises `ProtocolError` on malformed input or on paths
  that cannot be encoded.
- **`lanxfer.progress`** provides `ProgressWriter` and `format_size`. For
  example, `format_size(1536)` returns `"1.50KB"`.
- **`lanxfer.state`**:
  - `parse_port` and `parse_ip` raise `lanxfer.form_field.ValidationError`
    for invalid input.
  - `ReceiverState` and `SenderState` hold the settings and status of each
    side.
  - `Language` lists the interface languages.
- **`lanxfer.form_field.FormField`** keeps raw input text, its last valid
  value and the current error message.
- **`lanxfer.logs.LogBuffer`** collects messages from several threads in
  batches and keeps only the newest lines (500 by default) when flushed.

## Wire format

Each entry is sent as:

- one byte: `0` for a file, `1` for a directory;
- a big-endian 16-bit length followed by the UTF-8 path, relative to the
  parent of the path being sent;
- for files only: a big-endian 64-bit size followed by that many bytes of
  content.

The receiver reads entries until the connection closes and creates
directories as needed.

## What it does not do

- It has no graphical interface, only the command line and the library
  functions above.
- Messages are printed in English only. `Language` is not used to translate
  anything.
- Transfers are neither encrypted nor authenticated.
- The receiver does not check the paths it is sent. Only run it where you
  trust the senders that can reach it.
# kvraft

Building blocks for a key-value store replicated with Raft. The package has no
dependencies outside the standard library.

## Modules

- `kvraft.skiplist`: `SkipList`, an ordered, thread-safe key/value map, and its
  `Node`. `insert_element` returns `True` when the key is added and `False` when
  it is already there. `insert_set_element` replaces an existing value.
  `search_element` returns the value or raises `KeyError`. `delete_element`
  returns whether the key was present. `dump_file` produces a JSON text snapshot
  that `load_file` reads back. The list also supports `len()`, `in` and
  iteration over `(key, value)` pairs in key order. Inserts, searches and
  deletes print a line that describes what they did.
- `kvraft.op`: `Op`, a dataclass for a client command (`operation`, `key`,
  `value`, `client_id`, `request_id`). `as_string()` and
  `Op.parse_from_string()` turn it into JSON text and back.
  `parse_from_string` raises `ValueError` on malformed input.
- `kvraft.lockqueue`: `LockQueue`, a thread-safe FIFO queue. `pop()` blocks
  until an item arrives. `timeout_pop(ms)` raises `TimeoutError` if nothing
  arrives within that many milliseconds.
- `kvraft.util`: timing constants (`HEARTBEAT_TIMEOUT`, `APPLY_INTERVAL`, the
  election-timeout bounds, `CONSENSUS_TIMEOUT`) and the reply strings `OK`,
  `ERR_NO_KEY` and `ERR_WRONG_LEADER`. It also has these helpers:
  - `get_randomized_election_timeout()` returns a random timeout between 300 and 500 ms.
  - `sleep_n_milliseconds()` pauses the calling thread.
  - `now()` returns a monotonic timestamp.
  - `is_release_port()` checks whether a port can be bound on loopback.
  - `get_release_port()` returns the first free port among thirty consecutive
    ports, or raises `OSError`.
  - `dprintf()` prints a timestamped debug line when `DEBUG` is true.
  - `my_assert()` prints an error and raises `SystemExit(1)`.
- `kvraft.rpc.config`: `RpcConfig` reads `key=value` files. Lines starting with
  `#` are skipped, surrounding spaces are trimmed, and the first occurrence of a
  key wins. `load(key)` returns `""` for an unknown key. `load_config_file`
  raises `FileNotFoundError` for a missing file.
- `kvraft.rpc.controller`: `RpcController` holds the per-call failure state
  (`failed`, `error_text`, `set_failed`, `reset`) and the cancellation state
  (`start_cancel`, `is_canceled`, `notify_on_cancel`).
- `kvraft.rpc.channel`: request framing and a client channel.
  - `encode_varint` and `decode_varint` read and write base-128 varints.
  - `RpcHeader` serialises the service name, method name and argument size in
    protocol-buffer wire format.
  - `encode_request` builds a frame: a varint header length, then the header,
    then the arguments. `decode_request` splits such a frame into header and
    arguments.
  - `RpcChannel(ip, port, connect_now)` keeps one TCP connection.
    `call_method(service_name, method_name, controller, request, response)`
    sends a frame and reads a reply of up to 1024 bytes. It reconnects when
    needed. It returns the raw reply, or returns `None` after recording the
    failure on the controller.
- `kvraft.rpc.provider`: `RpcProvider` is a registry of published services.
  `notify_service` registers a service. `find_method` looks up a service and
  method by name, or raises `KeyError`. `ServiceInfo` holds one registered
  service.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

```python
from kvraft.skiplist import SkipList

store = SkipList(6)
store.insert_element("a", "1")
store.insert_set_element("a", "2")
assert store.search_element("a") == "2"

snapshot = store.dump_file()
restored = SkipList(6)
restored.load_file(snapshot)
assert list(restored) == [("a", "2")]
```

```python
from kvraft.op import Op

op = Op(operation="Put", key="k", value="v", client_id="c1", request_id=1)
assert Op.parse_from_string(op.as_string()) == op
```

```python
from kvraft.lockqueue import LockQueue

queue = LockQueue()
queue.push("entry")
item = queue.timeout_pop(50)  # waits at most 50 ms, else TimeoutError
```

```python
from kvraft.rpc.channel import decode_request, encode_request

frame = encode_request("KvService", "Get", b"\x0a\x01k")
header, args = decode_request(frame)
assert header.method_name == "Get" and args == b"\x0a\x01k"
```

## What this package does not do

The package has no Raft consensus node, no key-value server and no client clerk.
It also has no command to run.

`RpcProvider` only records services. It does not listen on a socket or dispatch
incoming calls. A node that serves `RpcChannel` calls has to read frames with
`decode_request`, look up the handler with `find_method`, and write the reply
itself.

Snapshots from `SkipList.dump_file` are returned as strings. Nothing is written
to disk.
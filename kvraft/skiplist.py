"""An ordered in-memory key/value map built on a skip list."""

from __future__ import annotations

import json
import random
import threading
from dataclasses import dataclass, field
from typing import Any, Generic, Iterator, List, Optional, Tuple, TypeVar

K = TypeVar("K")
V = TypeVar("V")


@dataclass(eq=False)
class Node(Generic[K, V]):
    """One entry of the skip list, linked forward on ``level`` levels."""

    key: K
    value: V
    level: int
    forward: List[Optional["Node[K, V]"]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.forward = [None] * self.level


class SkipList(Generic[K, V]):
    """Thread-safe sorted map with logarithmic expected search time.

    Keys must be mutually comparable with ``<`` and ``==``.  Inserting a key
    that is already present leaves the stored value unchanged; use
    :meth:`insert_set_element` to overwrite.
    """

    def __init__(self, max_level: int) -> None:
        if max_level < 1:
            raise ValueError("max_level must be at least 1")
        self._max_level = max_level
        self._level = 0
        self._count = 0
        self._header: Node[Any, Any] = Node(None, None, max_level)
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            _, candidate = self._locate(key)
            return candidate is not None and candidate.key == key

    def __iter__(self) -> Iterator[Tuple[K, V]]:
        with self._lock:
            entries = list(self._walk())
        return iter(entries)

    @property
    def max_level(self) -> int:
        """The greatest number of levels a node may occupy."""
        return self._max_level

    @property
    def level(self) -> int:
        """The number of levels currently in use."""
        return self._level

    def _walk(self) -> Iterator[Tuple[K, V]]:
        node = self._header.forward[0]
        while node is not None:
            yield node.key, node.value
            node = node.forward[0]

    def _locate(self, key: Any) -> Tuple[List[Node[Any, Any]], Optional[Node[K, V]]]:
        """Return the rightmost node before ``key`` on each level, and the
        first node at or after ``key`` on level 0."""
        update: List[Node[Any, Any]] = [self._header] * self._max_level
        current = self._header
        for i in reversed(range(self._level)):
            nxt = current.forward[i]
            while nxt is not None and nxt.key < key:
                current = nxt
                nxt = current.forward[i]
            update[i] = current
        return update, current.forward[0]

    def get_random_level(self) -> int:
        """Draw a node height: 1, then one more per coin flip, capped."""
        level = 1
        while level < self._max_level and random.getrandbits(1):
            level += 1
        return level

    def insert_element(self, key: K, value: V) -> bool:
        """Insert ``key`` with ``value``.

        Returns True if the key was added, False if it was already present.
        """
        with self._lock:
            update, candidate = self._locate(key)
            if candidate is not None and candidate.key == key:
                print(f"key: {key}, exists")
                return False
            node_level = self.get_random_level()
            if node_level > self._level:
                self._level = node_level
            node: Node[K, V] = Node(key, value, node_level)
            for i in range(node_level):
                node.forward[i] = update[i].forward[i]
                update[i].forward[i] = node
            self._count += 1
            print(f"insert key: {key}, value: {value}")
            return True

    def display_list(self) -> None:
        """Print every level of the list with its key:value pairs."""
        with self._lock:
            print("\n*****Skip List*****")
            for i in range(self._level):
                parts = []
                node = self._header.forward[i]
                while node is not None:
                    parts.append(f"{node.key}:{node.value};")
                    node = node.forward[i]
                print(f"Level {i}: " + "".join(parts))

    def search_element(self, key: K) -> V:
        """Return the value stored for ``key``; raise ``KeyError`` if absent."""
        with self._lock:
            _, candidate = self._locate(key)
            if candidate is not None and candidate.key == key:
                print(f"Found key: {key}, value: {candidate.value}")
                return candidate.value
        print(f"Not Found Key:{key}")
        raise KeyError(key)

    def delete_element(self, key: K) -> bool:
        """Remove ``key``; return True if it was present."""
        with self._lock:
            update, candidate = self._locate(key)
            if candidate is None or candidate.key != key:
                return False
            for i in range(self._level):
                if update[i].forward[i] is not candidate:
                    break
                update[i].forward[i] = candidate.forward[i]
            while self._level > 0 and self._header.forward[self._level - 1] is None:
                self._level -= 1
            self._count -= 1
            print(f"Successfully deleted key {key}")
            return True

    def insert_set_element(self, key: K, value: V) -> None:
        """Insert ``key`` with ``value``, replacing any existing value."""
        with self._lock:
            if key in self:
                self.delete_element(key)
            self.insert_element(key, value)

    def dump_file(self) -> str:
        """Serialise all entries, in key order, to a text snapshot."""
        with self._lock:
            keys = []
            values = []
            for key, value in self._walk():
                keys.append(key)
                values.append(value)
        return json.dumps({"keys": keys, "values": values}, ensure_ascii=False)

    def load_file(self, dump_str: str) -> None:
        """Insert every entry of a snapshot made by :meth:`dump_file`.

        An empty string is ignored.  Raises ``ValueError`` if the snapshot
        is malformed.
        """
        if not dump_str:
            return
        try:
            data = json.loads(dump_str)
        except json.JSONDecodeError as exc:
            raise ValueError(f"malformed snapshot: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError("malformed snapshot: expected an object")
        keys = data.get("keys")
        values = data.get("values")
        if not isinstance(keys, list) or not isinstance(values, list):
            raise ValueError("malformed snapshot: keys and values must be lists")
        if len(keys) != len(values):
            raise ValueError("malformed snapshot: keys and values differ in length")
        with self._lock:
            for key, value in zip(keys, values):
                self.insert_element(key, value)

    def size(self) -> int:
        """Return the number of stored entries."""
        with self._lock:
            return self._count
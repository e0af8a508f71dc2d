"""The command a key-value server hands to the consensus log."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields


@dataclass
class Op:
    """A client request: Get, Put or Append, tagged for duplicate detection."""

    operation: str = ""
    key: str = ""
    value: str = ""
    client_id: str = ""
    request_id: int = 0

    def as_string(self) -> str:
        """Serialise this command to a text form suitable for the log."""
        return json.dumps(asdict(self), ensure_ascii=False)

    @classmethod
    def parse_from_string(cls, text: str) -> "Op":
        """Rebuild a command from the output of :meth:`as_string`.

        Raises ``ValueError`` if the text is not a valid serialised command.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"malformed command: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError("malformed command: expected an object")
        names = {f.name for f in fields(cls)}
        if set(data) != names:
            raise ValueError(f"malformed command: fields {sorted(data)}")
        for name in ("operation", "key", "value", "client_id"):
            if not isinstance(data[name], str):
                raise ValueError(f"malformed command: {name} must be a string")
        request_id = data["request_id"]
        if not isinstance(request_id, int) or isinstance(request_id, bool):
            raise ValueError("malformed command: request_id must be an integer")
        return cls(**data)

    def __str__(self) -> str:
        return (
            f"[MyClass:Operation{{{self.operation}}},Key{{{self.key}}},"
            f"Value{{{self.value}}},ClientId{{{self.client_id}}},"
            f"RequestId{{{self.request_id}}}"
        )
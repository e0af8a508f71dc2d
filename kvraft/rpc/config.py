"""Reader for the plain ``key=value`` configuration files of RPC nodes."""

from __future__ import annotations

import os
from typing import Dict, Union

PathLike = Union[str, "os.PathLike[str]"]


class RpcConfig:
    """Key/value settings read from a configuration file.

    Lines starting with ``#`` are comments, lines without ``=`` are ignored,
    and spaces around keys and values are dropped.  When a key appears more
    than once, its first value is kept.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, str] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def load_config_file(self, path: PathLike) -> None:
        """Parse ``path`` and add its entries.

        Raises ``FileNotFoundError`` if the file does not exist.
        """
        with open(path, encoding="utf-8") as handle:
            for raw in handle:
                line = raw.strip(" ")
                if not line or line.startswith("#"):
                    continue
                key, sep, rest = line.partition("=")
                if not sep:
                    continue
                value = rest.split("\n", 1)[0].strip(" ")
                self._entries.setdefault(key.strip(" "), value)

    def load(self, key: str) -> str:
        """Return the value stored for ``key``, or an empty string."""
        return self._entries.get(key, "")
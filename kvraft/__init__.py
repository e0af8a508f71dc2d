"""Building blocks for a Raft-replicated key-value store: skip list, command type, blocking queue, RPC layer and utilities."""

__version__ = "0.1.0"
"""Shared settings and small helpers used across the key-value service."""

from __future__ import annotations

import random
import socket
import sys
import time

DEBUG = True

# Multiplier for all timing values; slower networks need a larger factor.
DEBUG_MUL = 1
HEARTBEAT_TIMEOUT = 25 * DEBUG_MUL  # ms
APPLY_INTERVAL = 10 * DEBUG_MUL  # ms

MIN_RANDOMIZED_ELECTION_TIME = 300 * DEBUG_MUL  # ms
MAX_RANDOMIZED_ELECTION_TIME = 500 * DEBUG_MUL  # ms

CONSENSUS_TIMEOUT = 500 * DEBUG_MUL  # ms

FIBER_THREAD_NUM = 1
FIBER_USE_CALLER_THREAD = False

# Replies sent from the key-value server to its clients.
OK = "OK"
ERR_NO_KEY = "ErrNoKey"
ERR_WRONG_LEADER = "ErrWrongLeader"

_PORT_SEARCH_LIMIT = 30


def my_assert(condition: bool, message: str = "Assertion failed!") -> None:
    """Terminate the process with a failure status if ``condition`` is false."""
    if not condition:
        print(f"Error: {message}", file=sys.stderr, flush=True)
        raise SystemExit(1)


def now() -> float:
    """Return a high-resolution monotonic timestamp in seconds."""
    return time.monotonic()


def get_randomized_election_timeout() -> int:
    """Return a random election timeout in milliseconds."""
    return random.randint(MIN_RANDOMIZED_ELECTION_TIME, MAX_RANDOMIZED_ELECTION_TIME)


def sleep_n_milliseconds(n: int) -> None:
    """Block the calling thread for ``n`` milliseconds."""
    time.sleep(n / 1000)


def is_release_port(port: int) -> bool:
    """Return True if ``port`` can be bound on the loopback interface."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind(("127.0.0.1", port))
        except (OSError, OverflowError):
            return False
    return True


def get_release_port(port: int) -> int:
    """Return the first free port starting at ``port``.

    Up to thirty consecutive ports are tried; ``OSError`` is raised if none
    of them is free.
    """
    for candidate in range(port, port + _PORT_SEARCH_LIMIT):
        if is_release_port(candidate):
            return candidate
    raise OSError(f"no free port in range {port}..{port + _PORT_SEARCH_LIMIT - 1}")


def dprintf(fmt: str, *args: object) -> None:
    """Print a timestamped, printf-style debug line when debugging is enabled."""
    if not DEBUG:
        return
    t = time.localtime()
    stamp = f"[{t.tm_year}-{t.tm_mon}-{t.tm_mday}-{t.tm_hour}-{t.tm_min}-{t.tm_sec}] "
    message = fmt % args if args else fmt
    print(stamp + message, flush=True)
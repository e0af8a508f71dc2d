"""Client side of the RPC framing: request encoding and a TCP channel."""

from __future__ import annotations

import socket
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from kvraft.rpc.controller import RpcController
from kvraft.util import dprintf

_RECV_SIZE = 1024
_CONNECT_RETRIES = 3
_MAX_VARINT_BYTES = 10

_WIRE_VARINT = 0
_WIRE_FIXED64 = 1
_WIRE_LENGTH = 2
_WIRE_FIXED32 = 5


def encode_varint(value: int) -> bytes:
    """Encode a non-negative integer as a base-128 varint."""
    if value < 0:
        raise ValueError("varint must not be negative")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def decode_varint(data: bytes, offset: int) -> Tuple[int, int]:
    """Decode a varint at ``offset``; return the value and the next offset."""
    result = 0
    shift = 0
    position = offset
    while True:
        if position >= len(data):
            raise ValueError("truncated varint")
        if position - offset >= _MAX_VARINT_BYTES:
            raise ValueError("varint too long")
        byte = data[position]
        position += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result, position
        shift += 7


def _key(field: int, wire_type: int) -> bytes:
    return encode_varint((field << 3) | wire_type)


def _length_delimited(field: int, payload: bytes) -> bytes:
    return _key(field, _WIRE_LENGTH) + encode_varint(len(payload)) + payload


@dataclass
class RpcHeader:
    """Names the service and method of a call and the size of its arguments."""

    service_name: str = ""
    method_name: str = ""
    args_size: int = 0

    def serialize(self) -> bytes:
        """Encode the header in protocol-buffer wire format."""
        out = bytearray()
        if self.service_name:
            out += _length_delimited(1, self.service_name.encode("utf-8"))
        if self.method_name:
            out += _length_delimited(2, self.method_name.encode("utf-8"))
        if self.args_size:
            out += _key(3, _WIRE_VARINT) + encode_varint(self.args_size)
        return bytes(out)

    @classmethod
    def parse(cls, data: bytes) -> "RpcHeader":
        """Decode a header produced by :meth:`serialize`.

        Raises ``ValueError`` on malformed input.
        """
        header = cls()
        offset = 0
        while offset < len(data):
            key, offset = decode_varint(data, offset)
            field, wire_type = key >> 3, key & 0x7
            if wire_type == _WIRE_VARINT:
                value, offset = decode_varint(data, offset)
                if field == 3:
                    header.args_size = value
            elif wire_type == _WIRE_LENGTH:
                length, offset = decode_varint(data, offset)
                end = offset + length
                if end > len(data):
                    raise ValueError("truncated length-delimited field")
                chunk = bytes(data[offset:end])
                offset = end
                try:
                    text = chunk.decode("utf-8")
                except UnicodeDecodeError as exc:
                    raise ValueError(f"invalid text in header: {exc}") from exc
                if field == 1:
                    header.service_name = text
                elif field == 2:
                    header.method_name = text
            elif wire_type in (_WIRE_FIXED64, _WIRE_FIXED32):
                width = 8 if wire_type == _WIRE_FIXED64 else 4
                if offset + width > len(data):
                    raise ValueError("truncated fixed-width field")
                offset += width
            else:
                raise ValueError(f"unsupported wire type {wire_type}")
        return header


def encode_request(service_name: str, method_name: str, args: bytes) -> bytes:
    """Frame a call: varint header length, header, then the argument bytes."""
    header = RpcHeader(service_name, method_name, len(args)).serialize()
    return encode_varint(len(header)) + header + bytes(args)


def decode_request(data: bytes) -> Tuple[RpcHeader, bytes]:
    """Split a framed call into its header and argument bytes.

    Raises ``ValueError`` if the frame is malformed or incomplete.
    """
    header_len, offset = decode_varint(data, 0)
    end = offset + header_len
    if end > len(data):
        raise ValueError("truncated header")
    header = RpcHeader.parse(data[offset:end])
    args_end = end + header.args_size
    if args_end > len(data):
        raise ValueError("truncated arguments")
    return header, bytes(data[end:args_end])


class RpcChannel:
    """Keeps one TCP connection to a peer and carries calls over it."""

    def __init__(self, ip: str, port: int, connect_now: bool) -> None:
        self._ip = ip
        self._port = port
        self._sock: Optional[socket.socket] = None
        if not connect_now:
            return
        error = self._connect()
        retries = _CONNECT_RETRIES
        while error is not None and retries:
            print(error)
            error = self._connect()
            retries -= 1

    def __enter__(self) -> "RpcChannel":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def connected(self) -> bool:
        """True while a connection is held open."""
        return self._sock is not None

    def _connect(self) -> Optional[str]:
        """Open a new connection; return an error message on failure."""
        self._sock = None
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            return f"create socket error! errno:{exc.errno}"
        try:
            sock.connect((self._ip, self._port))
        except (OSError, OverflowError) as exc:
            sock.close()
            return f"connect fail! errno:{getattr(exc, 'errno', None)}"
        self._sock = sock
        return None

    def close(self) -> None:
        """Close the connection, if any; a later call reconnects."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    @staticmethod
    def _serialize(request: Any) -> bytes:
        if isinstance(request, (bytes, bytearray, memoryview)):
            return bytes(request)
        return request.SerializeToString()

    def call_method(
        self,
        service_name: str,
        method_name: str,
        controller: RpcController,
        request: Any,
        response: Any,
    ) -> Optional[bytes]:
        """Send one call and read its reply.

        ``request`` is raw bytes or an object with ``SerializeToString()``;
        ``response``, if not None, receives the reply via
        ``ParseFromString()``.  Returns the raw reply, or None after recording
        the failure on ``controller``.
        """
        if self._sock is None:
            error = self._connect()
            if error is not None:
                dprintf("[RpcChannel.call_method] reconnect to ip:{%s} port{%d} failed", self._ip, self._port)
                controller.set_failed(error)
                return None
            dprintf("[RpcChannel.call_method] connected to ip:{%s} port{%d}", self._ip, self._port)

        try:
            args = self._serialize(request)
        except Exception:
            controller.set_failed("serialize request error!")
            return None

        payload = encode_request(service_name, method_name, args)

        while True:
            assert self._sock is not None
            try:
                self._sock.sendall(payload)
                break
            except OSError:
                print(f"reconnecting to peer ip: {self._ip} port: {self._port}")
                self.close()
                error = self._connect()
                if error is not None:
                    controller.set_failed(error)
                    return None

        try:
            data = self._sock.recv(_RECV_SIZE)
        except OSError as exc:
            self.close()
            controller.set_failed(f"recv error! errno:{exc.errno}")
            return None

        if response is not None:
            try:
                response.ParseFromString(data)
            except Exception:
                controller.set_failed(f"parse error! response_str:{data!r}")
                return None
        return data
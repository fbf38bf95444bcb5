"""Transports: blocking line-based send/receive.

Each transport satisfies the :class:`Transport` protocol: ``send`` writes one
complete message and ``receive`` blocks until one complete message is
available.
"""

from __future__ import annotations

import io
import sys
from typing import Protocol, TextIO, runtime_checkable

from toolhost.protocol.errors import TransportClosed


@runtime_checkable
class Transport(Protocol):
    """Duplex, newline-delimited message channel."""

    def send(self, message: str) -> None: ...
    def receive(self) -> str: ...


class StreamTransport:
    """Reads lines from one text stream and writes lines to another."""

    def __init__(self, reader: TextIO, writer: TextIO) -> None:
        self._reader = reader
        self._writer = writer

    def send(self, message: str) -> None:
        """Write *message* followed by a newline, then flush."""
        if "\n" in message:
            msg = "message must not contain a newline"
            raise ValueError(msg)
        self._writer.write(message + "\n")
        self._writer.flush()

    def receive(self) -> str:
        """Read one line, without its terminator.

        Raises:
            TransportClosed: the reader hit end of input.
        """
        line = self._reader.readline()
        if not line:
            msg = "Transport closed"
            raise TransportClosed(msg)
        return line.rstrip("\r\n")


class StdioTransport(StreamTransport):
    """Serves over the process's standard input and output.

    Both streams are switched to UTF-8 so the wire encoding does not depend on
    the locale. Undecodable input bytes become U+FFFD.
    """

    def __init__(self) -> None:
        for stream in (sys.stdin, sys.stdout):
            if isinstance(stream, io.TextIOWrapper):
                stream.reconfigure(encoding="utf-8", errors="replace")
        super().__init__(sys.stdin, sys.stdout)

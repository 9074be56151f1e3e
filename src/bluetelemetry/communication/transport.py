"""
Telemetry link transports

The link module offers a single serial port profile channel. It is reached
either through a serial device (a bound /dev/rfcommN, a USB adapter or any
pyserial URL such as socket://host:port) or directly over an RFCOMM socket.

Everything on the link is ASCII text terminated by CR LF. Transports hand out
raw chunks of that stream; LineFramer reassembles the lines and
TelemetryReader feeds them to a session.
"""

import logging
import socket
import threading
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Iterator, List, Optional

import serial

from ..errors import TransportConnectionError

logger = logging.getLogger(__name__)

LINE_END = b"\r\n"
RFCOMM_CHANNEL = 1
DEFAULT_BAUDRATE = 115200
MAX_LINE_BUFFER = 4096

READ_TIMEOUT = 0.5      # seconds; bounds how long stop() takes to be noticed
WRITE_TIMEOUT = 1.0
CONNECT_TIMEOUT = 10.0


class Transport(ABC):
    """
    One link to a telemetry module.

    A transport that fails while reading or writing closes itself, so
    is_connected() turning False is the only end-of-stream signal.
    """

    @abstractmethod
    def connect(self) -> bool:
        """Open the link. Logs the reason and returns False on failure."""

    @abstractmethod
    def disconnect(self):
        """Close the link; safe to call when already closed."""

    @abstractmethod
    def send(self, data: bytes) -> bool:
        """Write a complete command. Returns False if it could not be sent."""

    @abstractmethod
    def read_chunk(self, timeout: float = READ_TIMEOUT) -> Optional[bytes]:
        """Next bytes of the line stream (may end mid-line), or None on timeout."""

    @abstractmethod
    def is_connected(self) -> bool:
        pass

    def describe(self) -> str:
        return self.__class__.__name__


class SerialTransport(Transport):
    """
    Serial device or pyserial URL carrying the SPP channel.

    Reads stop at the CR LF terminator, so a chunk is normally one whole line.
    """

    def __init__(self, port: str, baudrate: int = DEFAULT_BAUDRATE):
        self.port = port
        self.baudrate = baudrate
        self._serial: Optional[serial.SerialBase] = None
        self._write_lock = threading.Lock()

    def connect(self) -> bool:
        try:
            self._serial = serial.serial_for_url(
                self.port, baudrate=self.baudrate,
                timeout=READ_TIMEOUT, write_timeout=WRITE_TIMEOUT)
        except (serial.SerialException, ValueError) as e:
            logger.error(f"Cannot open {self.port}: {e}")
            return False
        # Whatever the module sent before we listened starts mid-line
        self._serial.reset_input_buffer()
        logger.info(f"Opened {self.port} at {self.baudrate} baud")
        return True

    def _close(self):
        port, self._serial = self._serial, None
        if port is None:
            return
        try:
            port.close()
        except serial.SerialException as e:
            logger.debug(f"Error closing {self.port}: {e}")

    def disconnect(self):
        with self._write_lock:
            self._close()
        logger.info(f"Closed {self.port}")

    def send(self, data: bytes) -> bool:
        with self._write_lock:
            if self._serial is None:
                return False
            try:
                self._serial.write(data)
                self._serial.flush()
                return True
            except serial.SerialException as e:
                logger.error(f"Write to {self.port} failed: {e}")
                self._close()
                return False

    def read_chunk(self, timeout: float = READ_TIMEOUT) -> Optional[bytes]:
        port = self._serial
        if port is None:
            return None
        try:
            port.timeout = timeout
            data = port.read_until(LINE_END, MAX_LINE_BUFFER)
        except serial.SerialException as e:
            logger.error(f"Read from {self.port} failed: {e}")
            with self._write_lock:
                self._close()
            return None
        return data or None

    def is_connected(self) -> bool:
        return self._serial is not None and self._serial.is_open

    def describe(self) -> str:
        return f"serial {self.port}"


class BluetoothTransport(Transport):
    """
    RFCOMM socket straight to the module's serial port profile.

    Needs a Python built with Bluetooth socket support (Linux, BlueZ). On
    other platforms bind an rfcomm device and use SerialTransport instead.
    """

    def __init__(self, address: str, channel: int = RFCOMM_CHANNEL):
        self.address = address
        self.channel = channel
        self._socket: Optional[socket.socket] = None
        self._write_lock = threading.Lock()

    def connect(self) -> bool:
        family = getattr(socket, "AF_BLUETOOTH", None)
        if family is None:
            logger.error("No Bluetooth socket support; bind an rfcomm device and use --port")
            return False
        sock = None
        try:
            sock = socket.socket(family, socket.SOCK_STREAM, socket.BTPROTO_RFCOMM)
            sock.settimeout(CONNECT_TIMEOUT)
            sock.connect((self.address, self.channel))
        except OSError as e:
            logger.error(f"Cannot reach {self.address} channel {self.channel}: {e}")
            if sock is not None:
                sock.close()
            return False
        self._socket = sock
        logger.info(f"Connected to {self.address} channel {self.channel}")
        return True

    def _close(self):
        sock, self._socket = self._socket, None
        if sock is None:
            return
        try:
            sock.close()
        except OSError as e:
            logger.debug(f"Error closing socket to {self.address}: {e}")

    def disconnect(self):
        with self._write_lock:
            self._close()
        logger.info(f"Disconnected from {self.address}")

    def send(self, data: bytes) -> bool:
        with self._write_lock:
            if self._socket is None:
                return False
            try:
                self._socket.sendall(data)
                return True
            except OSError as e:
                logger.error(f"Send to {self.address} failed: {e}")
                self._close()
                return False

    def read_chunk(self, timeout: float = READ_TIMEOUT) -> Optional[bytes]:
        sock = self._socket
        if sock is None:
            return None
        try:
            sock.settimeout(timeout)
            data = sock.recv(MAX_LINE_BUFFER)
        except socket.timeout:
            return None
        except OSError as e:
            logger.error(f"Receive from {self.address} failed: {e}")
            data = b""
        if not data:
            # Remote hang-up
            with self._write_lock:
                self._close()
            return None
        return data

    def is_connected(self) -> bool:
        return self._socket is not None

    def describe(self) -> str:
        return f"Bluetooth {self.address} channel {self.channel}"


class TransportFactory:
    """Builds a transport from a settings dict."""

    @staticmethod
    def create(config: dict) -> Optional[Transport]:
        """
        Args:
            config: {"type": "Serial", "port": ..., "baudrate": ...} or
                {"type": "Bluetooth", "address": ..., "channel": ...}

        Returns:
            Unconnected transport, or None for an unknown type
        """
        kind = config.get("type", "")
        if kind == "Serial":
            return SerialTransport(config.get("port", ""),
                                   config.get("baudrate", DEFAULT_BAUDRATE))
        if kind == "Bluetooth":
            return BluetoothTransport(config.get("address", ""),
                                      config.get("channel", RFCOMM_CHANNEL))
        logger.error(f"Unknown transport type: {kind}")
        return None


class LineFramer:
    """
    Accumulates received bytes and yields complete CR LF terminated lines.

    A buffer that grows past max_buffer without a terminator is discarded;
    this happens when the link speed or the device is misconfigured.
    """

    def __init__(self, max_buffer: int = MAX_LINE_BUFFER):
        self.max_buffer = max_buffer
        self._buffer = bytearray()
        self.dropped_bytes = 0

    def feed(self, data: bytes) -> List[str]:
        self._buffer.extend(data)
        lines = []
        while True:
            pos = self._buffer.find(LINE_END)
            if pos < 0:
                break
            raw = bytes(self._buffer[:pos])
            del self._buffer[:pos + len(LINE_END)]
            lines.append(raw.decode("ascii", errors="replace"))

        if len(self._buffer) > self.max_buffer:
            logger.warning(f"Line buffer overflow, dropping {len(self._buffer)} bytes")
            self.dropped_bytes += len(self._buffer)
            self._buffer.clear()
        return lines

    def iter_lines(self, chunks: Iterable[bytes]) -> Iterator[str]:
        for chunk in chunks:
            yield from self.feed(chunk)

    @property
    def pending(self) -> int:
        """Bytes of an unfinished line."""
        return len(self._buffer)

    def clear(self):
        self._buffer.clear()


class TelemetryReader(threading.Thread):
    """
    Pulls the line stream from a transport and hands each line to a callback.

    Usage:
        reader = TelemetryReader(transport, session.process_line)
        reader.start()
        ...
        reader.stop()
    """

    def __init__(self, transport: Transport, on_line: Callable[[str], object],
                 timeout: float = READ_TIMEOUT):
        super().__init__(name="TelemetryReader", daemon=True)
        self.transport = transport
        self.on_line = on_line
        self.timeout = timeout
        self.framer = LineFramer()
        self._stop_event = threading.Event()

    def stop(self):
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def poll(self) -> int:
        """
        Read one chunk and dispatch its complete lines.

        Returns:
            Number of lines dispatched

        Raises:
            TransportConnectionError: If the link is closed
        """
        if not self.transport.is_connected():
            raise TransportConnectionError(f"{self.transport.describe()} is closed")
        data = self.transport.read_chunk(self.timeout)
        if not data:
            return 0
        lines = self.framer.feed(data)
        for line in lines:
            self.on_line(line)
        return len(lines)

    def run(self):
        logger.info(f"Reading from {self.transport.describe()}")
        while not self._stop_event.is_set():
            try:
                self.poll()
            except TransportConnectionError as e:
                logger.error(f"Reader stopped: {e}")
                break
        if self.framer.pending:
            logger.debug(f"Discarding {self.framer.pending} bytes of an unfinished line")
        logger.info("Reader finished")

"""
Sequential big-endian reader over a binary stream.
"""

import io
import struct
from typing import BinaryIO

from .errors import ClassReadError


_U1 = struct.Struct(">B")
_U2 = struct.Struct(">H")
_U4 = struct.Struct(">I")
_U8 = struct.Struct(">Q")
_I1 = struct.Struct(">b")
_I2 = struct.Struct(">h")
_I4 = struct.Struct(">i")
_I8 = struct.Struct(">q")
_F4 = struct.Struct(">f")
_F8 = struct.Struct(">d")


class ByteReader:
    """Reads class file primitives strictly forward.

    Every read returns exactly the requested number of bytes or raises
    ClassReadError; short reads are never padded.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.pos = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> "ByteReader":
        return cls(io.BytesIO(data))

    @property
    def offset(self) -> int:
        """Number of bytes consumed so far."""
        return self.pos

    def read_bytes(self, length: int) -> bytes:
        if length < 0:
            raise ValueError(f"Negative read length: {length}")
        chunks = []
        remaining = length
        # Raw and socket streams may return fewer bytes than asked for.
        while remaining:
            try:
                chunk = self.stream.read(remaining)
            except OSError as e:
                raise ClassReadError(f"couldn't read the class file: {e}") from e
            if not chunk:
                got = length - remaining
                raise ClassReadError(
                    f"unexpected end of class file at offset {self.pos + got}: "
                    f"wanted {length} bytes, got {got}"
                )
            chunks.append(chunk)
            remaining -= len(chunk)
        self.pos += length
        return b"".join(chunks)

    def _unpack(self, fmt: struct.Struct):
        return fmt.unpack(self.read_bytes(fmt.size))[0]

    def read_u1(self) -> int:
        return self._unpack(_U1)

    def read_u2(self) -> int:
        return self._unpack(_U2)

    def read_u4(self) -> int:
        return self._unpack(_U4)

    def read_u8(self) -> int:
        return self._unpack(_U8)

    def read_i1(self) -> int:
        return self._unpack(_I1)

    def read_i2(self) -> int:
        return self._unpack(_I2)

    def read_i4(self) -> int:
        return self._unpack(_I4)

    def read_i8(self) -> int:
        return self._unpack(_I8)

    def read_f4(self) -> float:
        return self._unpack(_F4)

    def read_f8(self) -> float:
        return self._unpack(_F8)

"""ByteReader — little-endian primitive field reader over a byte buffer."""

from __future__ import annotations

import struct

from race_telemetry.protocol.errors import DecodeError, InsufficientDataError

# All wire scalars are little-endian and packed.
_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_F32 = struct.Struct("<f")


class ByteReader:
    """Cursor over *data* that decodes fixed-width scalars and byte runs.

    Every read advances the cursor.  A read past the end of the buffer raises
    :class:`InsufficientDataError` and leaves the cursor where it was.
    """

    def __init__(self, data: bytes | bytearray | memoryview, offset: int = 0) -> None:
        self._data = data
        self._offset = offset

    @property
    def offset(self) -> int:
        """Current cursor position."""
        return self._offset

    @property
    def remaining(self) -> int:
        """Number of unread bytes."""
        return len(self._data) - self._offset

    def remainder(self) -> bytes:
        """Return the unread bytes without advancing."""
        return bytes(self._data[self._offset :])

    def _unpack(self, codec: struct.Struct, field: str):
        self.require(codec.size, field)
        (value,) = codec.unpack_from(self._data, self._offset)
        self._offset += codec.size
        return value

    def require(self, size: int, field: str) -> None:
        """Raise :class:`InsufficientDataError` unless *size* bytes are left."""
        if self.remaining < size:
            raise InsufficientDataError(field, self._offset, size, max(self.remaining, 0))

    def u8(self, field: str = "") -> int:
        return self._unpack(_U8, field)

    def u16(self, field: str = "") -> int:
        return self._unpack(_U16, field)

    def u32(self, field: str = "") -> int:
        return self._unpack(_U32, field)

    def u64(self, field: str = "") -> int:
        return self._unpack(_U64, field)

    def f32(self, field: str = "") -> float:
        return self._unpack(_F32, field)

    def unpack(self, codec: struct.Struct, field: str = "") -> tuple:
        """Decode a whole fixed-layout record with *codec*."""
        self.require(codec.size, field)
        values = codec.unpack_from(self._data, self._offset)
        self._offset += codec.size
        return values

    def take(self, size: int, field: str = "") -> bytes:
        """Return the next *size* raw bytes."""
        self.require(size, field)
        chunk = bytes(self._data[self._offset : self._offset + size])
        self._offset += size
        return chunk

    def skip(self, size: int, field: str = "") -> None:
        self.require(size, field)
        self._offset += size

    def ascii(self, size: int, field: str = "") -> str:
        """Return the next *size* bytes decoded as ASCII."""
        start = self._offset
        raw = self.take(size, field)
        try:
            return raw.decode("ascii")
        except UnicodeDecodeError as exc:
            self._offset = start
            raise DecodeError(
                f"{field!r} is not ASCII: {raw!r}", field=field, offset=start
            ) from exc

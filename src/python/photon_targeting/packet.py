"""
Packet: growable byte buffer with fixed-width read/write primitives.

Writes append to the end of the buffer, reads consume from a cursor that
starts at 0. Every primitive is little-endian:

    int8/16/32/64, uint8/16/32   two's complement / unsigned
    float32, float64             IEEE 754
    bool                         one byte, 0 or 1

Reading past the end raises PacketUnderrunError and leaves the cursor where
it was.
"""

import struct
from typing import Optional, Union

BYTE_ORDER = '<'

_INT8 = struct.Struct(BYTE_ORDER + 'b')
_INT16 = struct.Struct(BYTE_ORDER + 'h')
_INT32 = struct.Struct(BYTE_ORDER + 'i')
_INT64 = struct.Struct(BYTE_ORDER + 'q')
_UINT8 = struct.Struct(BYTE_ORDER + 'B')
_UINT16 = struct.Struct(BYTE_ORDER + 'H')
_UINT32 = struct.Struct(BYTE_ORDER + 'I')
_FLOAT32 = struct.Struct(BYTE_ORDER + 'f')
_FLOAT64 = struct.Struct(BYTE_ORDER + 'd')


class PacketError(Exception):
    pass


class PacketUnderrunError(PacketError):
    def __init__(self, needed: int, available: int, position: int):
        self.needed = needed
        self.available = available
        self.position = position
        super().__init__(
            f"Packet underrun at byte {position}: need {needed} byte(s), {available} available")


class Packet:
    def __init__(self, data: Optional[Union[bytes, bytearray]] = None):
        self._data = bytearray(data) if data else bytearray()
        self._read_pos = 0

    @property
    def read_position(self) -> int:
        return self._read_pos

    def size(self) -> int:
        return len(self._data)

    def remaining(self) -> int:
        return len(self._data) - self._read_pos

    def get_data(self) -> bytes:
        return bytes(self._data)

    def reset_read(self):
        self._read_pos = 0

    def clear(self):
        self._data.clear()
        self._read_pos = 0

    def require(self, needed: int):
        """Raise PacketUnderrunError unless `needed` more bytes can be read."""
        available = self.remaining()
        if needed > available:
            raise PacketUnderrunError(needed, available, self._read_pos)

    def _encode(self, fmt: struct.Struct, value):
        self._data.extend(fmt.pack(value))

    def _decode(self, fmt: struct.Struct):
        self.require(fmt.size)
        value = fmt.unpack_from(self._data, self._read_pos)[0]
        self._read_pos += fmt.size
        return value

    # --- Writers ---

    def encode_int8(self, value: int): self._encode(_INT8, value)
    def encode_int16(self, value: int): self._encode(_INT16, value)
    def encode_int32(self, value: int): self._encode(_INT32, value)
    def encode_int64(self, value: int): self._encode(_INT64, value)
    def encode_uint8(self, value: int): self._encode(_UINT8, value)
    def encode_uint16(self, value: int): self._encode(_UINT16, value)
    def encode_uint32(self, value: int): self._encode(_UINT32, value)
    def encode_float32(self, value: float): self._encode(_FLOAT32, value)
    def encode_float64(self, value: float): self._encode(_FLOAT64, value)

    def encode_bool(self, value: bool):
        self._encode(_UINT8, 1 if value else 0)

    # --- Readers ---

    def decode_int8(self) -> int: return self._decode(_INT8)
    def decode_int16(self) -> int: return self._decode(_INT16)
    def decode_int32(self) -> int: return self._decode(_INT32)
    def decode_int64(self) -> int: return self._decode(_INT64)
    def decode_uint8(self) -> int: return self._decode(_UINT8)
    def decode_uint16(self) -> int: return self._decode(_UINT16)
    def decode_uint32(self) -> int: return self._decode(_UINT32)
    def decode_float32(self) -> float: return self._decode(_FLOAT32)
    def decode_float64(self) -> float: return self._decode(_FLOAT64)

    def decode_bool(self) -> bool:
        return self._decode(_UINT8) != 0

    def __len__(self):
        return len(self._data)

    def __repr__(self):
        return f"Packet(size={len(self._data)}, read_pos={self._read_pos})"


def to_float32(value: float) -> float:
    """Round a Python float to the nearest IEEE single-precision value."""
    return _FLOAT32.unpack(_FLOAT32.pack(value))[0]


def float64_bits(value: float) -> bytes:
    return _FLOAT64.pack(value)


def hexdump(data: bytes, width: int = 16) -> str:
    lines = []
    for off in range(0, len(data), width):
        chunk = data[off:off + width]
        lines.append(f"{off:04x}  {chunk.hex(' ')}")
    return "\n".join(lines)

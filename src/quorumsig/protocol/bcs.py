"""
quorumsig/protocol/bcs.py

Canonical binary encoding for multisig wire objects.

The layout is fixed by the ledger that consumes aggregates:
- sequence and byte-vector lengths are ULEB128 prefixes
- integers are fixed-width little-endian
- struct fields are written in declaration order with no padding or tags

Decoding is strict. Truncated input, non-canonical ULEB128 and lengths that
run past the buffer raise MalformedAggregateError, never a partial value.

Usage:
    ser = Serializer()
    ser.sequence([b"ab", b"c"], Serializer.to_bytes)
    ser.u16(3)
    data = ser.output()

    der = Deserializer(data)
    items = der.sequence(Deserializer.to_bytes)
    value = der.u16()
    der.finish()
"""

from typing import Callable, List, Sequence, TypeVar

from ..errors import CapacityExceededError, MalformedAggregateError

T = TypeVar("T")

# ULEB128 lengths are u32 on the wire
MAX_ULEB128_VALUE = 0xFFFFFFFF
MAX_ULEB128_BYTES = 5

# Integer widths in bytes
U8_WIDTH = 1
U16_WIDTH = 2


# ============================================================================
# SERIALIZER
# ============================================================================

class Serializer:
    """Append-only writer producing canonical bytes."""

    def __init__(self):
        self._buffer = bytearray()

    def output(self) -> bytes:
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)

    def uleb128(self, value: int) -> None:
        if value < 0 or value > MAX_ULEB128_VALUE:
            raise CapacityExceededError(f"Length {value} does not fit in a ULEB128 u32")
        while value >= 0x80:
            self._buffer.append((value & 0x7F) | 0x80)
            value >>= 7
        self._buffer.append(value)

    def _uint(self, value: int, width: int) -> None:
        if value < 0 or value >= 1 << (8 * width):
            raise CapacityExceededError(f"Value {value} does not fit in u{8 * width}")
        self._buffer.extend(value.to_bytes(width, "little"))

    def u8(self, value: int) -> None:
        self._uint(value, U8_WIDTH)

    def u16(self, value: int) -> None:
        self._uint(value, U16_WIDTH)

    def fixed_bytes(self, value: bytes) -> None:
        self._buffer.extend(value)

    def to_bytes(self, value: bytes) -> None:
        """Length-prefixed byte vector."""
        self.uleb128(len(value))
        self._buffer.extend(value)

    def sequence(self, values: Sequence[T], encoder: Callable[["Serializer", T], None]) -> None:
        """Length-prefixed sequence, each element written by encoder(self, value)."""
        self.uleb128(len(values))
        for value in values:
            encoder(self, value)


# ============================================================================
# DESERIALIZER
# ============================================================================

class Deserializer:
    """Strict reader over canonical bytes."""

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._offset = 0

    def remaining(self) -> int:
        return len(self._data) - self._offset

    def _read(self, length: int) -> bytes:
        if length > self.remaining():
            raise MalformedAggregateError(
                f"Unexpected end of input: need {length} bytes at offset "
                f"{self._offset}, have {self.remaining()}"
            )
        chunk = self._data[self._offset:self._offset + length]
        self._offset += length
        return chunk

    def uleb128(self) -> int:
        value = 0
        for shift_index in range(MAX_ULEB128_BYTES):
            byte = self._read(1)[0]
            value |= (byte & 0x7F) << (7 * shift_index)
            if byte & 0x80 == 0:
                # A trailing zero group means the same value had a shorter form
                if shift_index > 0 and byte == 0:
                    raise MalformedAggregateError("Non-canonical ULEB128 encoding")
                if value > MAX_ULEB128_VALUE:
                    raise MalformedAggregateError(f"ULEB128 value {value} overflows u32")
                return value
        raise MalformedAggregateError("ULEB128 encoding longer than 5 bytes")

    def _uint(self, width: int) -> int:
        return int.from_bytes(self._read(width), "little")

    def u8(self) -> int:
        return self._uint(U8_WIDTH)

    def u16(self) -> int:
        return self._uint(U16_WIDTH)

    def fixed_bytes(self, length: int) -> bytes:
        return self._read(length)

    def to_bytes(self) -> bytes:
        length = self.uleb128()
        return self._read(length)

    def sequence(self, decoder: Callable[["Deserializer"], T]) -> List[T]:
        length = self.uleb128()
        # Every element takes at least one byte, so a longer count is corrupt
        if length > self.remaining():
            raise MalformedAggregateError(
                f"Sequence length {length} exceeds remaining {self.remaining()} bytes"
            )
        return [decoder(self) for _ in range(length)]

    def finish(self) -> None:
        """Require that the whole input was consumed."""
        if self.remaining():
            raise MalformedAggregateError(f"{self.remaining()} trailing bytes after value")

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .errors import AllocationFailure, ImageSizeMismatch, OutOfRange
from .protocol import BASE_ADDRESS, IMAGE_SIZE
from .records import PatchRecord


class OverlayImage:
    """Fixed-size ROM buffer that records are overlaid onto.

    Offsets are `start_address - base_address`. Every record is bounds
    checked before any of its bytes are written, so a rejected record
    leaves the buffer as it was.
    """

    def __init__(self, data: bytes, base_address: int = BASE_ADDRESS, size: int = IMAGE_SIZE):
        if len(data) != size:
            raise ImageSizeMismatch(len(data), size)
        try:
            self.data = bytearray(data)
        except MemoryError as e:
            raise AllocationFailure(f"Cannot allocate {size} byte image") from e
        self.base_address = base_address
        self.size = size
        self.total = 0
        self.applied = 0

    @classmethod
    def blank(cls, fill: int = 0, **kwargs) -> "OverlayImage":
        size = kwargs.get("size", IMAGE_SIZE)
        return cls(bytes([fill]) * size, **kwargs)

    @classmethod
    def load(cls, path: Path, **kwargs) -> "OverlayImage":
        with open(path, "rb") as f:
            raw = f.read()
        return cls(raw, **kwargs)

    def offset_of(self, start_address: int, length: int) -> int:
        offset = start_address - self.base_address
        if offset < 0 or offset + length > self.size:
            raise OutOfRange(start_address, length, self.base_address, self.size)
        return offset

    def apply(self, record: PatchRecord) -> int:
        """Overlay one record and return the image offset it landed at."""
        n = len(record.payload)
        offset = self.offset_of(record.start_address, n)
        self.data[offset:offset + n] = record.payload
        self.total += n
        self.applied += 1
        return offset

    def apply_all(self, records: Iterable[PatchRecord]) -> int:
        # Order matters: later records overwrite earlier ones.
        for rec in records:
            self.apply(rec)
        return self.total

    def to_bytes(self) -> bytes:
        return bytes(self.data)

    def write(self, path: Path) -> None:
        with open(path, "wb") as f:
            f.write(self.data)

"""Overlay error taxonomy.

Every error is fatal for the run. Each class carries a stable code used by
the verifier's JSON output.
"""
from __future__ import annotations

class OverlayError(ValueError):
    code = "E_OVERLAY"

class PlatformIncompatible(OverlayError):
    code = "E_PLATFORM"

class IoOpenFailure(OverlayError):
    code = "E_IO_OPEN"

class AllocationFailure(OverlayError):
    code = "E_ALLOC"

class ImageSizeMismatch(OverlayError):
    code = "E_IMAGE_SIZE"

    def __init__(self, actual: int, expected: int):
        super().__init__(f"Image is {actual} bytes, expected {expected}")
        self.actual = actual
        self.expected = expected

class InvalidMagic(OverlayError):
    code = "E_MAGIC"

    def __init__(self, found: int | None):
        if found is None:
            msg = "Wrong magic word in p file (stream too short)"
        else:
            msg = f"Wrong magic word in p file: 0x{found:04X}"
        super().__init__(msg)
        self.found = found

class TruncatedHeader(OverlayError):
    code = "E_TRUNCATED_HEADER"

    def __init__(self, offset: int, got: int, expected: int):
        super().__init__(f"Truncated record header at offset {offset}: {got} of {expected} bytes")
        self.offset = offset

class TruncatedPayload(OverlayError):
    code = "E_TRUNCATED_PAYLOAD"

    def __init__(self, offset: int, got: int, expected: int):
        super().__init__(f"Truncated payload at offset {offset}: {got} of {expected} bytes")
        self.offset = offset
        self.got = got
        self.expected = expected

class UnknownRecordType(OverlayError):
    code = "E_RECORD_TYPE"

    def __init__(self, record_type: int, offset: int | None = None):
        msg = f"Unknown record type {record_type:X}"
        if offset is not None:
            msg += f" at offset {offset}"
        super().__init__(msg)
        self.record_type = record_type
        self.offset = offset

class OutOfRange(OverlayError):
    code = "E_OUT_OF_RANGE"

    def __init__(self, start_address: int, length: int, base_address: int, size: int):
        super().__init__(
            f"Record at 0x{start_address:06X} (+{length}) falls outside image "
            f"0x{base_address:06X}..0x{base_address + size:06X}"
        )
        self.start_address = start_address
        self.length = length

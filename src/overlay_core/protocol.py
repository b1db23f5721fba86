"""AS ".p" patch stream constants.

Single source of truth for the on-disk magic, record layout and the
address space of the ROM image. Decoder and applier must stay in sync.
"""
import struct

from .errors import PlatformIncompatible

# Stream magic, always big-endian: bytes 0x89 0x14
MAGIC = 0x8914
MAGIC_FMT = ">H"
MAGIC_LEN = 2

# Record types
REC_TERMINATOR = 0x00
REC_DATA = 0x81

# Header: [Type(1) | Header(1) | CPU(1) | Granularity(1) | Start(4) | Length(2)] = 10 bytes
REC_HEADER_FMT = ">BBBBIH"
REC_HEADER_FMT_LE = "<BBBBIH"
REC_HEADER_LEN = 10

# ROM image address space
BASE_ADDRESS = 0xC00000
IMAGE_SIZE = 0x80000  # 512 KiB


def check_platform() -> None:
    """Fail if the packed struct layouts do not have the sizes the format needs."""
    sizes = {
        MAGIC_FMT: MAGIC_LEN,
        REC_HEADER_FMT: REC_HEADER_LEN,
        REC_HEADER_FMT_LE: REC_HEADER_LEN,
    }
    for fmt, expected in sizes.items():
        actual = struct.calcsize(fmt)
        if actual != expected:
            raise PlatformIncompatible(f"Type incompatibility: {fmt!r} packs to {actual} bytes, expected {expected}")

"""Overlay Core - .p stream decoding and ROM image overlay."""
from .errors import (
    OverlayError,
    PlatformIncompatible,
    IoOpenFailure,
    AllocationFailure,
    ImageSizeMismatch,
    InvalidMagic,
    TruncatedHeader,
    TruncatedPayload,
    UnknownRecordType,
    OutOfRange,
)
from .image import OverlayImage
from .protocol import BASE_ADDRESS, IMAGE_SIZE, MAGIC
from .records import PatchRecord, PatchStream, iter_records

__all__ = [
    "OverlayError",
    "PlatformIncompatible",
    "IoOpenFailure",
    "AllocationFailure",
    "ImageSizeMismatch",
    "InvalidMagic",
    "TruncatedHeader",
    "TruncatedPayload",
    "UnknownRecordType",
    "OutOfRange",
    "OverlayImage",
    "PatchRecord",
    "PatchStream",
    "iter_records",
    "BASE_ADDRESS",
    "IMAGE_SIZE",
    "MAGIC",
]

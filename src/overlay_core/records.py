"""Decoder for AS ".p" patch streams.

The format has no index: each record's boundary depends on every record
before it, so decoding is strictly sequential from the magic onward.
"""
from __future__ import annotations

import struct
from typing import BinaryIO, Iterator, NamedTuple
from warnings import warn

from .errors import InvalidMagic, TruncatedHeader, TruncatedPayload, UnknownRecordType
from .protocol import (
    MAGIC,
    MAGIC_FMT,
    MAGIC_LEN,
    REC_DATA,
    REC_HEADER_FMT,
    REC_HEADER_FMT_LE,
    REC_HEADER_LEN,
    REC_TERMINATOR,
)


class PatchRecord(NamedTuple):
    start_address: int
    payload: bytes
    header_byte: int = 0
    cpu_type: int = 0
    granularity: int = 0
    offset: int = 0  # stream offset of the record header

    @property
    def length(self) -> int:
        return len(self.payload)


class PatchStream:
    """Lazy record source over a readable binary stream.

    The magic is validated on construction, so a stream with the wrong
    marker fails before any record is looked at. Iteration consumes the
    underlying stream and cannot be restarted.
    """

    def __init__(self, f: BinaryIO, little_endian: bool = False):
        self.f = f
        self.header_fmt = REC_HEADER_FMT_LE if little_endian else REC_HEADER_FMT
        self.pos = 0
        self._read_magic()

    def _read(self, n: int) -> bytes:
        data = self.f.read(n)
        self.pos += len(data)
        return data

    def _read_magic(self) -> None:
        raw = self._read(MAGIC_LEN)
        if len(raw) < MAGIC_LEN:
            raise InvalidMagic(None)
        (word,) = struct.unpack(MAGIC_FMT, raw)
        if word != MAGIC:
            raise InvalidMagic(word)

    def __iter__(self) -> Iterator[PatchRecord]:
        while True:
            start_off = self.pos
            header = self._read(REC_HEADER_LEN)

            # Clean EOF acts as an implicit terminator
            if len(header) == 0:
                return

            # AS may end a stream with a bare terminator byte
            if header[0] == REC_TERMINATOR:
                self._skip_trailing()
                return

            if len(header) < REC_HEADER_LEN:
                raise TruncatedHeader(start_off, len(header), REC_HEADER_LEN)

            rtype, hdr, cpu, gran, start, dlen = struct.unpack(self.header_fmt, header)

            if rtype != REC_DATA:
                raise UnknownRecordType(rtype, start_off)

            payload = self._read(dlen)
            if len(payload) != dlen:
                raise TruncatedPayload(start_off, len(payload), dlen)

            if dlen == 0:
                warn(f"Empty data record at offset {start_off}")

            yield PatchRecord(start, payload, hdr, cpu, gran, start_off)

    def _skip_trailing(self) -> None:
        rest = self.f.read()
        if rest:
            warn(f"Ignoring {len(rest)} bytes after terminator at offset {self.pos}")
            self.pos += len(rest)


def iter_records(f: BinaryIO, little_endian: bool = False) -> Iterator[PatchRecord]:
    """Validate the magic, then yield data records in stream order."""
    return iter(PatchStream(f, little_endian=little_endian))

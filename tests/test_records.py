import io
import struct

import pytest

from overlay_core.errors import InvalidMagic, TruncatedHeader, TruncatedPayload, UnknownRecordType
from overlay_core.protocol import MAGIC, REC_HEADER_LEN
from overlay_core.records import PatchStream, iter_records


def decode(blob: bytes, **kw):
    return list(iter_records(io.BytesIO(blob), **kw))


def test_magic_then_terminator_has_no_records(pfile_builder):
    assert decode(pfile_builder.build_pfile([])) == []


def test_single_record_fields(pfile_builder):
    blob = pfile_builder.build_pfile([(0xC00010, b"\xaa\xbb\xcc\xdd")])
    (rec,) = decode(blob)
    assert rec.start_address == 0xC00010
    assert rec.payload == b"\xaa\xbb\xcc\xdd"
    assert rec.length == 4
    assert rec.cpu_type == pfile_builder.CPU_68000
    assert rec.offset == 2


def test_records_come_out_in_stream_order(pfile_builder):
    blob = pfile_builder.build_pfile([(0xC00100, b"\x01"), (0xC00000, b"\x02\x03"), (0xC00100, b"\x04")])
    assert [(r.start_address, r.payload) for r in decode(blob)] == [
        (0xC00100, b"\x01"),
        (0xC00000, b"\x02\x03"),
        (0xC00100, b"\x04"),
    ]


def test_wrong_magic_fails_before_any_record(pfile_builder):
    blob = pfile_builder.build_pfile([(0xC00010, b"\x00")], magic=0x1489)
    f = io.BytesIO(blob)
    with pytest.raises(InvalidMagic) as exc:
        iter_records(f)
    assert exc.value.found == 0x1489
    assert f.tell() == 2


def test_stream_too_short_for_magic():
    with pytest.raises(InvalidMagic) as exc:
        PatchStream(io.BytesIO(b"\x89"))
    assert exc.value.found is None


def test_unknown_record_type_stops_after_prior_records(pfile_builder):
    blob = pfile_builder.build_pfile([(0xC00000, b"\x11")], terminate=False)
    blob += pfile_builder.data_record(0xC00004, b"\x22", record_type=0x42)
    blob += pfile_builder.data_record(0xC00008, b"\x33")

    seen = []
    with pytest.raises(UnknownRecordType) as exc:
        for rec in iter_records(io.BytesIO(blob)):
            seen.append(rec.payload)
    assert seen == [b"\x11"]
    assert exc.value.record_type == 0x42
    assert "42" in str(exc.value)


def test_truncated_payload(pfile_builder):
    blob = pfile_builder.build_pfile([(0xC00000, b"\x01\x02\x03\x04")], terminate=False)[:-2]
    with pytest.raises(TruncatedPayload) as exc:
        decode(blob)
    assert exc.value.expected == 4
    assert exc.value.got == 2


def test_truncated_header(pfile_builder):
    blob = struct.pack(">H", MAGIC) + pfile_builder.data_record(0xC00000, b"")[:5]
    with pytest.raises(TruncatedHeader):
        decode(blob)


def test_bare_terminator_byte_ends_stream(pfile_builder):
    blob = pfile_builder.build_pfile([(0xC00000, b"\x01")], terminate=False) + b"\x00"
    assert len(decode(blob)) == 1


def test_end_of_stream_is_implicit_terminator(pfile_builder):
    blob = pfile_builder.build_pfile([(0xC00000, b"\x01"), (0xC00001, b"\x02")], terminate=False)
    assert len(decode(blob)) == 2


def test_records_after_terminator_are_ignored(pfile_builder):
    blob = pfile_builder.build_pfile([(0xC00000, b"\x01")])
    blob += pfile_builder.data_record(0xC00001, b"\x02")
    with pytest.warns(UserWarning, match="after terminator"):
        recs = decode(blob)
    assert len(recs) == 1


def test_header_is_ten_bytes(pfile_builder):
    assert REC_HEADER_LEN == 10
    assert len(pfile_builder.data_record(0xC00000, b"")) == REC_HEADER_LEN


def test_little_endian_fields():
    blob = struct.pack(">H", MAGIC) + struct.pack("<BBBBIH", 0x81, 1, 1, 1, 0xC00020, 2) + b"\xde\xad"
    (rec,) = decode(blob, little_endian=True)
    assert rec.start_address == 0xC00020
    assert rec.payload == b"\xde\xad"


def test_stream_is_not_restartable(pfile_builder):
    stream = PatchStream(io.BytesIO(pfile_builder.build_pfile([(0xC00000, b"\x01")])))
    assert len(list(stream)) == 1
    assert list(stream) == []

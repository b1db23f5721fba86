"""Build AS .p patch streams for tests and demos.

Usage:
    python tools/make_pfile.py OUT ADDR:HEX [ADDR:HEX ...] [--bad-magic] [--unknown TYPE] [--truncate N] [--no-terminator]

ADDR is a full address (e.g. 0xC00010); HEX is the payload, e.g. AABBCCDD.
"""
import struct
import sys
from pathlib import Path

from overlay_core.protocol import (
    MAGIC,
    MAGIC_FMT,
    REC_DATA,
    REC_HEADER_FMT,
    REC_HEADER_LEN,
    REC_TERMINATOR,
)

# AS header byte / CPU for 68000 output
HEADER_BYTE = 0x01
CPU_68000 = 0x01
GRANULARITY = 0x01


def data_record(start_address: int, payload: bytes, record_type: int = REC_DATA) -> bytes:
    header = struct.pack(
        REC_HEADER_FMT, record_type, HEADER_BYTE, CPU_68000, GRANULARITY, start_address, len(payload)
    )
    return header + payload


def terminator() -> bytes:
    return bytes([REC_TERMINATOR]) + bytes(REC_HEADER_LEN - 1)


def build_pfile(records, magic: int = MAGIC, terminate: bool = True) -> bytes:
    """records: iterable of (start_address, payload) pairs, in stream order."""
    blob = struct.pack(MAGIC_FMT, magic)
    for start, payload in records:
        blob += data_record(start, bytes(payload))
    if terminate:
        blob += terminator()
    return blob


def parse_record(arg: str) -> tuple[int, bytes]:
    addr, _, hexdata = arg.partition(":")
    return int(addr, 0), bytes.fromhex(hexdata)


if __name__ == "__main__":
    args = [a for a in sys.argv[1:] if a]

    def pop_flag(arg_list: list[str], flag: str) -> tuple[bool, list[str]]:
        """Remove a boolean flag from an argv-style list."""
        if flag in arg_list:
            return True, [a for a in arg_list if a != flag]
        return False, arg_list

    def pop_value(arg_list: list[str], flag: str) -> tuple[str | None, list[str]]:
        if flag not in arg_list:
            return None, arg_list
        i = arg_list.index(flag)
        if i + 1 >= len(arg_list):
            raise SystemExit(f"{flag} requires a value")
        return arg_list[i + 1], arg_list[:i] + arg_list[i + 2:]

    bad_magic, args = pop_flag(args, "--bad-magic")
    no_term, args = pop_flag(args, "--no-terminator")
    unknown, args = pop_value(args, "--unknown")
    truncate, args = pop_value(args, "--truncate")

    if not args:
        print(__doc__)
        raise SystemExit(2)

    out = Path(args[0])
    records = [parse_record(a) for a in args[1:]]

    blob = build_pfile(records, magic=0x1489 if bad_magic else MAGIC, terminate=False)
    if unknown is not None:
        blob += data_record(0xC00000, b"\xff", record_type=int(unknown, 0))
    if not no_term:
        blob += terminator()
    if truncate is not None:
        blob = blob[: len(blob) - int(truncate)]

    out.write_bytes(blob)
    print(f"GENERATED: {out} ({len(records)} records, {len(blob)} bytes)")

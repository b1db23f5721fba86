import sys
from pathlib import Path

def main():
    if len(sys.argv) != 2:
        print("Usage: corrupt_one_byte.py <pfile>")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    b = bytearray(p.read_bytes())
    if len(b) < 12:
        print("File too small to hold a record.")
        raise SystemExit(2)

    # Magic is 2 bytes; the first record header starts right after it.
    # Flipping its type byte 0x81 -> 0x80 makes the record unknown.
    idx = 2
    b[idx] ^= 0x01
    p.write_bytes(bytes(b))
    print(f"Corrupted 1 byte at offset {idx} in {p}")

if __name__ == "__main__":
    main()

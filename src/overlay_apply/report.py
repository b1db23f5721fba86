from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Iterable

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from overlay_core.protocol import BASE_ADDRESS
from overlay_core.records import PatchRecord

REPORT_SCHEMA = pa.schema(
    [
        ("index", pa.int32()),
        ("start_address", pa.int64()),
        ("offset", pa.int64()),
        ("length", pa.int32()),
        ("end_offset", pa.int64()),
        ("stream_offset", pa.int64()),
        ("content_hash", pa.string()),
    ]
)


def records_frame(records: Iterable[PatchRecord], base_address: int = BASE_ADDRESS) -> pd.DataFrame:
    """One row per applied record, in stream order."""
    rows: list[dict] = []
    for i, rec in enumerate(records):
        offset = rec.start_address - base_address
        rows.append(
            {
                "index": i,
                "start_address": int(rec.start_address),
                "offset": int(offset),
                "length": int(rec.length),
                "end_offset": int(offset + rec.length),
                "stream_offset": int(rec.offset),
                "content_hash": hashlib.sha256(rec.payload).hexdigest(),
            }
        )
    return pd.DataFrame(rows, columns=REPORT_SCHEMA.names)


def write_report(records: Iterable[PatchRecord], out_path: Path, base_address: int = BASE_ADDRESS) -> bool:
    """Write the per-record Parquet report. Returns False when there was nothing to write."""
    df = records_frame(records, base_address)
    if df.empty:
        return False

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    table = pa.Table.from_pandas(df, schema=REPORT_SCHEMA, preserve_index=False)
    pq.write_table(table, out_path)
    return True

"""Find overlapping records in an overlay report."""
from __future__ import annotations

import sys
from pathlib import Path

import duckdb


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python query.py <report.parquet>")
        print("Example: python query.py build/overlay.parquet")
        sys.exit(1)

    report = Path(sys.argv[1])

    con = duckdb.connect(":memory:")
    con.execute(f"CREATE VIEW records AS SELECT * FROM '{report}'")

    # Later records win wherever ranges intersect
    sql = """
    SELECT
        a."index" AS earlier,
        b."index" AS later,
        GREATEST(a."offset", b."offset") AS overlap_start,
        LEAST(a.end_offset, b.end_offset) AS overlap_end
    FROM records a
    JOIN records b ON a."index" < b."index"
    WHERE a."offset" < b.end_offset
      AND b."offset" < a.end_offset
    ORDER BY earlier, later
    """

    print(f"--- Overlapping records: {report} ---\n")

    df = con.execute(sql).fetchdf()
    if df.empty:
        print("No overlapping records.")
    else:
        for _, row in df.iterrows():
            print(f"#{row['earlier']} overwritten by #{row['later']}")
            print(f"  Range: 0x{int(row['overlap_start']):05X}..0x{int(row['overlap_end']):05X}")
            print()


if __name__ == "__main__":
    main()

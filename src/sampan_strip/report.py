"""Per-file Parquet report."""
from __future__ import annotations

from pathlib import Path

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

REPORT_SCHEMA = pa.schema(
    [
        ("input", pa.string()),
        ("output", pa.string()),
        ("status", pa.string()),
        ("total", pa.int64()),
        ("extracted", pa.int64()),
        ("entries", pa.int64()),
        ("code", pa.string()),
        ("message", pa.string()),
    ]
)


def write_report(results: list[dict], path: Path) -> None:
    df = pd.DataFrame(results, columns=REPORT_SCHEMA.names)
    if df.empty:
        return

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    table = pa.Table.from_pandas(df, schema=REPORT_SCHEMA, preserve_index=False)
    pq.write_table(table, path)

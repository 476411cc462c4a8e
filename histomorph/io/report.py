"""Tabulate per-section results and export them with pandas."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Iterable, Mapping

import numpy as np
import pandas as pd

COLUMNS = [
    "name",
    "surface",
    "perimeter_length",
    "area",
    "red_length",
    "green_length",
    "double_length",
    "single_length",
    "double_runs",
    "single_runs",
    "mean_thickness",
    "median_thickness",
    "thickness_samples",
    "thickness_pairs",
    "ms_bs",
    "mar",
    "bfr_bs",
    "error",
]


def _surface_code(surface) -> str:
    return surface.value if surface is not None else ""


def _missing(value: float | None) -> float:
    return np.nan if value is None else float(value)


def perimeter_record(result) -> dict[str, Any]:
    """Flatten a :class:`~histomorph.analysis.types.PerimeterResult`."""

    return {
        "name": result.name,
        "surface": _surface_code(result.surface),
        "perimeter_length": result.perimeter_length,
        "area": result.area,
        "red_length": result.red_length,
        "green_length": result.green_length,
        "double_length": result.double_length,
        "single_length": result.single_length,
        "double_runs": result.double_count,
        "single_runs": result.single_count,
    }


def thickness_record(result) -> dict[str, Any]:
    """Flatten a :class:`~histomorph.analysis.types.ThicknessUnitResult`.

    A thickness that could not be measured is written as ``NaN``.
    """

    return {
        "name": result.name,
        "surface": _surface_code(result.surface),
        "mean_thickness": _missing(result.mean_thickness),
        "median_thickness": _missing(result.median_thickness),
        "thickness_samples": result.sample_count,
        "thickness_pairs": result.pair_count,
    }


class ReportSink:
    """Append-only collection of result records.

    Appends are serialized with a lock so workers may report directly.
    """

    def __init__(self) -> None:
        self._records: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def append(self, record: Mapping[str, Any]) -> None:
        if "name" not in record:
            raise KeyError("report records need a 'name' entry")
        with self._lock:
            self._records.append(dict(record))

    def extend(self, records: Iterable[Mapping[str, Any]]) -> None:
        for record in records:
            self.append(record)

    def records(self) -> list[dict[str, Any]]:
        with self._lock:
            return [dict(r) for r in self._records]

    def to_frame(self) -> pd.DataFrame:
        """Records as a DataFrame; known columns first, extras after."""

        df = pd.DataFrame.from_records(self.records())
        if df.empty:
            return pd.DataFrame(columns=COLUMNS)
        known = [c for c in COLUMNS if c in df.columns]
        extra = [c for c in df.columns if c not in COLUMNS]
        for col in ("mean_thickness", "median_thickness", "ms_bs", "mar", "bfr_bs"):
            if col in df.columns:
                df[col] = pd.to_numeric(df[col], errors="coerce")
        return df[known + extra]

    def write(self, path: str | Path) -> Path:
        """Write the table to ``.csv``, ``.tsv`` or ``.json``."""

        out = Path(path)
        suffix = out.suffix.lower()
        df = self.to_frame()
        out.parent.mkdir(parents=True, exist_ok=True)
        if suffix == ".csv":
            df.to_csv(out, index=False)
        elif suffix in (".tsv", ".txt"):
            df.to_csv(out, sep="\t", index=False)
        elif suffix == ".json":
            df.to_json(out, orient="records", indent=2)
        else:
            raise ValueError(f"Unsupported report format {out.suffix!r}; use .csv, .tsv or .json")
        return out

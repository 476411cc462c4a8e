import math

import pandas as pd
import pytest

from histomorph.io.report import COLUMNS, ReportSink


def test_empty_sink_frame_has_known_columns():
    frame = ReportSink().to_frame()
    assert frame.empty
    assert list(frame.columns) == COLUMNS


def test_frame_orders_known_columns_before_extras():
    sink = ReportSink()
    sink.append({"zeta": 1, "area": 2.0, "name": "a"})
    sink.append({"name": "b", "surface": "Es", "mean_thickness": None})
    frame = sink.to_frame()
    assert list(frame.columns) == ["name", "surface", "area", "mean_thickness", "zeta"]
    assert math.isnan(frame.loc[1, "mean_thickness"])


def test_append_requires_name():
    with pytest.raises(KeyError):
        ReportSink().append({"area": 1.0})


def test_records_are_copies():
    sink = ReportSink()
    record = {"name": "a", "area": 1.0}
    sink.append(record)
    record["area"] = 5.0
    sink.records()[0]["area"] = 9.0
    assert sink.records() == [{"name": "a", "area": 1.0}]


@pytest.mark.parametrize("suffix,sep", [(".csv", ","), (".tsv", "\t")])
def test_write_delimited(tmp_path, suffix, sep):
    sink = ReportSink()
    sink.extend([{"name": "a", "double_length": 1.5}, {"name": "b", "double_length": 2.5}])
    out = sink.write(tmp_path / "nested" / f"results{suffix}")
    back = pd.read_csv(out, sep=sep)
    assert back["name"].tolist() == ["a", "b"]
    assert back["double_length"].tolist() == [1.5, 2.5]


def test_write_json(tmp_path):
    sink = ReportSink()
    sink.append({"name": "a", "mar": 0.8})
    out = sink.write(tmp_path / "results.json")
    back = pd.read_json(out, orient="records")
    assert back.loc[0, "mar"] == pytest.approx(0.8)


def test_write_rejects_unknown_format(tmp_path):
    sink = ReportSink()
    sink.append({"name": "a"})
    with pytest.raises(ValueError):
        sink.write(tmp_path / "results.xlsx")

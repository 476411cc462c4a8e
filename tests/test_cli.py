from pathlib import Path

import pandas as pd
import pytest
import yaml

from histomorph import cli, path_config

from helpers import square_points


@pytest.fixture()
def config_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    cfg = tmp_path / "cfg"
    cfg.mkdir()
    (cfg / "analysis.yaml").write_text(
        yaml.safe_dump({"calibration": {"um_per_pixel": 0.5}}), encoding="utf-8"
    )
    (cfg / "dir_paths.yaml").write_text(
        yaml.safe_dump({"results": str(tmp_path / "results")}), encoding="utf-8"
    )
    monkeypatch.setenv("HISTOMORPH_CONFIG_DIR", str(cfg))
    path_config.reload_config_cache()
    yield cfg
    path_config.reload_config_cache()


@pytest.fixture()
def annotation_file(tmp_path: Path) -> Path:
    pts = square_points(4).tolist()
    payload = {
        "perimeters": [
            {
                "name": "tibia",
                "surface": "Ps",
                "perimeter": pts,
                "red": {"points": [pts[0], pts[8]], "markers": [pts[4]]},
                "green": {"points": [pts[4], pts[12]], "markers": [pts[6]]},
            },
            {"name": "broken", "surface": "Es", "perimeter": [pts[0]]},
        ],
        "thickness": [
            {
                "name": "tibia",
                "surface": "Ps",
                "curves": [[[x, 0.0] for x in range(30)], [[x, 4.0] for x in range(20)]],
            }
        ],
    }
    path = tmp_path / "sections.yaml"
    path.write_text(yaml.safe_dump(payload), encoding="utf-8")
    return path


def test_analyze_writes_results(config_dir, annotation_file, tmp_path, capsys):
    out = tmp_path / "out.csv"
    cli.main(["analyze", str(annotation_file), "--out", str(out), "--interval-days", "4"])

    captured = capsys.readouterr().out
    assert "Analyzed 3 units (1 failed)" in captured

    frame = pd.read_csv(out).set_index("name")
    tibia = frame.loc["tibia"]
    assert tibia["perimeter_length"] == pytest.approx(8.0)
    assert tibia["double_length"] == pytest.approx(2.0)
    assert tibia["mean_thickness"] == pytest.approx(2.0)
    assert tibia["mar"] == pytest.approx(0.5)
    assert "at least 2 points" in frame.loc["broken", "error"]


def test_bare_path_runs_analyze_with_scale_override(config_dir, annotation_file, tmp_path):
    out = tmp_path / "out.tsv"
    cli.main([str(annotation_file), "--out", str(out), "--scale", "1.0"])
    frame = pd.read_csv(out, sep="\t").set_index("name")
    assert frame.loc["tibia", "perimeter_length"] == pytest.approx(16.0)
    assert "mar" not in frame.columns


def test_default_output_goes_to_results_dir(config_dir, annotation_file, tmp_path):
    cli.main(["analyze", str(annotation_file)])
    assert (tmp_path / "results" / "histomorph_results.csv").exists()


def test_plot_dir(config_dir, annotation_file, tmp_path, capsys):
    plots = tmp_path / "plots"
    cli.main(["-v", "analyze", str(annotation_file), "--out", str(tmp_path / "o.csv"), "--plot-dir", str(plots)])
    assert (plots / "tibia_Ps.png").exists()
    assert "Wrote 1 perimeter plot(s)" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    cli.main([])
    assert "usage" in capsys.readouterr().out.lower()


@pytest.mark.parametrize("value", ["0", "-3"])
def test_interval_days_must_be_positive(config_dir, annotation_file, tmp_path, capsys, value):
    out = tmp_path / "out.csv"
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["analyze", str(annotation_file), "--out", str(out), "--interval-days", value])
    assert excinfo.value.code == 2
    assert "positive" in capsys.readouterr().err
    assert not out.exists()

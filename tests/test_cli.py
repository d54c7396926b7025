from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent.parent / "src"


def _env(tmp_path: Path) -> dict[str, str]:
    env = os.environ.copy()
    env["PANELCHART_OUTPUTS_DIR"] = str(tmp_path / "outputs")
    env["PANELCHART_OPTIONS_FILE"] = ""
    env["MPLBACKEND"] = "Agg"
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(SRC_DIR), env.get("PYTHONPATH", "")) if p)
    return env


def _run(args: list[str], env: dict[str, str], cwd: Path) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "panelchart.cli", *args],
        capture_output=True,
        text=True,
        env=env,
        cwd=cwd,
    )


def test_cli_doctor_writes_render_record(tmp_path: Path) -> None:
    env = _env(tmp_path)

    # Run: python -m panelchart.cli doctor
    result = _run(["doctor"], env, tmp_path)
    assert result.returncode == 0, result.stderr
    assert "animation: False" in result.stdout

    renders_dir = Path(env["PANELCHART_OUTPUTS_DIR"]) / "renders"
    records = list(renders_dir.glob("*/render_record.json"))
    assert len(records) >= 1, f"No render_record.json found. stdout:\n{result.stdout}"


def test_cli_render_writes_image_and_record(tmp_path: Path, crosstab_data) -> None:
    env = _env(tmp_path)
    data_path = tmp_path / "data.json"
    data_path.write_text(json.dumps(crosstab_data), encoding="utf-8")
    options_path = tmp_path / "opts.yaml"
    options_path.write_text("title: Sales by region\nwidth: 600\n", encoding="utf-8")
    out = tmp_path / "charts" / "sales.png"

    result = _run(
        ["render", "--data", str(data_path), "--options", str(options_path), "--out", str(out)],
        env,
        tmp_path,
    )
    assert result.returncode == 0, result.stderr
    assert out.exists()

    records = list((Path(env["PANELCHART_OUTPUTS_DIR"]) / "renders").glob("*/render_record.json"))
    assert len(records) == 1
    record = json.loads(records[0].read_text(encoding="utf-8"))
    assert record["variant"] == "bar"
    assert record["panels"][0]["box"] == [0.0, 0.0, 600.0, 300.0]


def test_cli_render_missing_data_file(tmp_path: Path) -> None:
    result = _run(["render", "--data", "nope.json", "--out", "x.png"], _env(tmp_path), tmp_path)
    assert result.returncode == 2
    assert "Data file not found" in result.stderr


def test_cli_unknown_command(tmp_path: Path) -> None:
    result = _run(["paint"], _env(tmp_path), tmp_path)
    assert result.returncode == 2
    assert "Unknown command" in result.stderr

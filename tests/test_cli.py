from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
SCRIPT = REPO_ROOT / "scripts" / "extrude_polygon.py"


def _rings_file(tmp_path: Path, payload) -> str:
    path = tmp_path / "region.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_cli_builds_and_exports_prism(tmp_path: Path):
    rings = _rings_file(
        tmp_path,
        {
            "boundary": [[0, 0], [10, 0], [10, 10], [0, 10]],
            "holes": [[[4, 4], [6, 4], [6, 6], [4, 6]]],
        },
    )
    cmd = [
        sys.executable,
        str(SCRIPT),
        "--input", rings,
        "--height", "5",
        "--output", str(tmp_path / "region.glb"),
        "--metrics", str(tmp_path / "metrics.json"),
    ]
    proc = subprocess.run(cmd, capture_output=True, text=True)
    assert proc.returncode == 0, proc.stderr
    assert "Prism: region" in proc.stdout
    assert "Area: 100" in proc.stdout
    assert (tmp_path / "region.glb").exists()

    metrics = json.loads((tmp_path / "metrics.json").read_text(encoding="utf-8"))
    assert metrics["centroid"] == [5.0, 5.0]
    assert metrics["surfaces"]["side"]["triangles"] == 8
    assert metrics["outline_loops"] == 2


def test_cli_flat_combined(tmp_path: Path):
    rings = _rings_file(tmp_path, {"boundary": [[0, 0], [4, 0], [0, 3]]})
    cmd = [
        sys.executable,
        str(SCRIPT),
        "--input", rings,
        "--flat",
        "--assembly", "combined",
        "--backend", "earcut",
        "--name", "tri",
    ]
    proc = subprocess.run(cmd, capture_output=True, text=True)
    assert proc.returncode == 0, proc.stderr
    assert "Surface combined: 1 triangles" in proc.stdout


def test_cli_reports_invalid_hole(tmp_path: Path):
    rings = _rings_file(
        tmp_path,
        {
            "boundary": [[0, 0], [10, 0], [10, 10], [0, 10]],
            "holes": [[[20, 20], [22, 20], [22, 22], [20, 22]]],
        },
    )
    proc = subprocess.run(
        [sys.executable, str(SCRIPT), "--input", rings],
        capture_output=True,
        text=True,
    )
    assert proc.returncode == 2
    assert "invalid_hole" in proc.stderr

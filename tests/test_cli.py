import pandas as pd
import pytest

from rstar_index.cli import main


def _grid_csv(path, n=8):
    rows = []
    for x in range(n):
        for y in range(n):
            rows.append((f"{x}-{y}", x, y, x + 0.5, y + 0.5))
    pd.DataFrame(rows, columns=["id", "minx", "miny", "maxx", "maxy"]).to_csv(path, index=False)
    return len(rows)


def test_cli_builds_tree_and_reports_stats(tmp_path):
    path = tmp_path / "grid.csv"
    n = _grid_csv(path)
    stats = main(["--input", str(path), "--max-entries", "4", "--min-fill", "0.5", "--query", "0,0,2,2"])
    assert stats["size"] == n
    assert stats["height"] >= 3
    assert len(stats["sibling_overlap"]) == stats["height"]


def test_cli_rejects_bad_query(tmp_path):
    path = tmp_path / "grid.csv"
    _grid_csv(path, n=2)
    with pytest.raises(SystemExit):
        main(["--input", str(path), "--query", "0,0,1"])


def test_cli_rejects_bad_capacity(tmp_path):
    path = tmp_path / "grid.csv"
    _grid_csv(path, n=2)
    with pytest.raises(ValueError):
        main(["--input", str(path), "--max-entries", "1"])

import importlib.util
import json
import os

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def _load_script():
    path = os.path.join(ROOT_DIR, "scripts", "diagnose_seeds.py")
    spec = importlib.util.spec_from_file_location("diagnose_seeds", path)
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def test_open_components_and_border_breaches():
    mod = _load_script()
    grid = [[1, 1, 1, 1], [1, 0, 1, 1], [1, 1, 1, 1], [1, 0, 0, 1]]
    assert mod.open_components(grid) == [2, 1]
    assert mod.border_breaches(grid, 1) == 2
    assert mod.border_breaches(grid, 0) == 0


def test_seed_report_is_clean(capsys):
    mod = _load_script()
    code = mod.main(["moss", "--width", "48", "--height", "32"])
    out = capsys.readouterr().out
    report = json.loads(out[out.index("{\n") :])
    assert code == 0
    (result,) = report["results"]
    assert result["seed"] == "moss"
    assert result["ok"] is True
    assert result["issues"]["border_breaches"] == 0

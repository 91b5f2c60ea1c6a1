import importlib.util
import json
import os

import pytest

TOOL = os.path.join(os.path.dirname(os.path.dirname(__file__)), "tools", "validate_entries.py")


@pytest.fixture(scope="module")
def tool():
    spec = importlib.util.spec_from_file_location("validate_entries", TOOL)
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def test_check_entries_buckets_problems(tool):
    data = {
        "2025-10-01": {"rating": 4, "description": "fine"},
        "2025-10-02": {"rating": 0, "description": ""},
        "2025-10-03": "not an object",
        "2025-10-04": {"rating": 2, "description": "x" * 2000},
        "Oct 5": {"rating": 3},
    }
    bad_dates, malformed, too_long, counts = tool.check_entries(data)
    assert bad_dates == ["Oct 5"]
    assert sorted(malformed) == ["2025-10-02", "2025-10-03"]
    assert too_long == ["2025-10-04"]
    assert counts == {"Good": 1, "Bad": 1}


def test_main_exit_codes(tool, tmp_path, capsys):
    good = tmp_path / "good.json"
    good.write_text(json.dumps({"2025-10-01": {"rating": 5, "description": ""}}), encoding="utf-8")
    assert tool.main(["--src", str(good)]) == 0
    assert "Records: 1" in capsys.readouterr().out

    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"2025-10-01": {"rating": "5"}}), encoding="utf-8")
    assert tool.main(["--src", str(bad)]) == 1

    with pytest.raises(SystemExit):
        tool.main(["--src", str(tmp_path / "missing.json")])

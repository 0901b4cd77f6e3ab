import csv

import pytest

import main
from models import AttackKind


def test_parse_attack_names():
    assert main.parse_args(["--attack", "sweep"]).attack is AttackKind.SWEEP
    assert main.parse_args(["--attack", "Intelligent"]).attack is AttackKind.INTELLIGENT
    assert main.parse_args([]).attack is AttackKind.NONE


def test_unknown_attack_is_a_usage_error():
    with pytest.raises(SystemExit):
        main.parse_args(["--attack", "emp"])


def test_headless_run_exports(tmp_path, capsys):
    out = tmp_path / "run.csv"
    args = main.parse_args(["--headless", "--ticks", "120", "--attack", "constant",
                            "--export", str(out)])
    sim = main.run(args)
    assert sim.state.tick == 120
    with open(out, newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0][0] == "Timestamp"
    assert len(rows) == len(sim.metrics) + 1
    assert all(r[1] == "Constant" for r in rows[1:])
    assert "Simulation Summary" in capsys.readouterr().out


def test_main_exit_status_is_zero(capsys):
    assert main.main(["--headless", "--ticks", "40"]) == 0
    assert "Simulation Summary" in capsys.readouterr().out


def test_main_as_console_script_exits_cleanly(capsys):
    # console-script wrappers call sys.exit(main())
    with pytest.raises(SystemExit) as exc:
        raise SystemExit(main.main(["--headless", "--ticks", "40"]))
    assert exc.value.code == 0


def test_headless_analysis_without_key(capsys, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    main.main(["--headless", "--ticks", "60", "--analyze"])
    assert "API key not configured" in capsys.readouterr().out

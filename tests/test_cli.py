"""Tests for the command-line interface."""
import csv
import json

import pytest

from rewardledger.cli import build_parser, main


def _run(tmp_path, *args):
    argv = ["--data", str(tmp_path / "ledger.json"), "--log-file", str(tmp_path / "cli.log")]
    main(argv + list(args))


def test_parser_defaults():
    args = build_parser().parse_args(["track", "wordsWritten"])
    assert args.kind == "wordsWritten"
    assert args.count == 1


def test_parser_rejects_unknown_kind():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["track", "sleepHours"])


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == 0
    assert "usage" in capsys.readouterr().out


def test_fresh_stats(tmp_path, capsys):
    _run(tmp_path, "stats")
    out = capsys.readouterr().out
    assert "Balance: 0.00 CC" in out
    assert "(none)" in out
    assert (tmp_path / "ledger.json").exists()


def test_track_persists(tmp_path, capsys):
    _run(tmp_path, "track", "tasksCompleted", "10")
    out = capsys.readouterr().out
    assert "earned 0.10 CC" in out
    assert "[success] +0.10 CC earned! Completing 10 tasks" in out

    _run(tmp_path, "stats")
    out = capsys.readouterr().out
    assert "Balance: 0.10 CC" in out
    assert "first_day" in out
    assert "Completing 10 tasks" in out


def test_quiet_hides_notifications(tmp_path, capsys):
    _run(tmp_path, "-q", "track", "tasksCompleted", "10")
    out = capsys.readouterr().out
    assert "[success]" not in out
    assert "Balance: 0.10 CC" in out


def test_spend_insufficient_exits_nonzero(tmp_path, capsys):
    with pytest.raises(SystemExit) as info:
        _run(tmp_path, "spend", "0.5", "hat")
    assert info.value.code == 1
    assert "Insufficient CC!" in capsys.readouterr().out


def test_purchase_and_spend(tmp_path, capsys):
    _run(tmp_path, "purchase", "small", "--reference", "pay-1")
    _run(tmp_path, "spend", "2.5", "hat")
    assert "Balance: 97.50 CC" in capsys.readouterr().out


def test_purchase_pending_fails(tmp_path):
    with pytest.raises(SystemExit):
        _run(tmp_path, "purchase", "small", "--status", "pending")


def test_reset_requires_yes(tmp_path, capsys):
    _run(tmp_path, "earn", "1.0", "seed")
    with pytest.raises(SystemExit):
        _run(tmp_path, "reset")
    assert "Refusing to reset" in capsys.readouterr().out
    _run(tmp_path, "reset", "--yes")
    assert "Balance: 0.00 CC" in capsys.readouterr().out


def test_quiz_and_hydrate(tmp_path, capsys):
    _run(tmp_path, "quiz", "5", "5")
    assert "Perfect score!" in capsys.readouterr().out
    _run(tmp_path, "hydrate", "8")
    assert "Balance: 0.05 CC" in capsys.readouterr().out


def test_exports(tmp_path):
    _run(tmp_path, "track", "wordsWritten", "100")
    _run(tmp_path, "export-csv", str(tmp_path / "tx.csv"))
    _run(tmp_path, "export-json", str(tmp_path / "stats.json"))

    with open(tmp_path / "tx.csv", newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert rows[0]["reason"] == "Writing 100 words"
    assert rows[0]["amount"] == "0.20"

    data = json.loads((tmp_path / "stats.json").read_text(encoding="utf-8"))
    assert data["balance"] == pytest.approx(0.2)
    assert data["counters"]["wordsWritten"] == 100


@pytest.mark.parametrize("command", ["earn", "spend"])
@pytest.mark.parametrize("amount", ["nan", "inf"])
def test_non_finite_amount_rejected(tmp_path, capsys, command, amount):
    _run(tmp_path, "earn", "0.5", "seed")
    with pytest.raises(SystemExit) as info:
        _run(tmp_path, command, amount, "glitch")
    assert info.value.code == 1
    _run(tmp_path, "stats")
    assert "Balance: 0.50 CC" in capsys.readouterr().out

import json

import pytest

import pingpal.scan.coordinator as coordinator_module
from pingpal.cli import main


@pytest.fixture
def scripted(monkeypatch, fake_prober):
    def install(**kwargs):
        prober = fake_prober(**kwargs)
        monkeypatch.setattr(coordinator_module, "Prober", lambda: prober)
        return prober

    return install


def test_sweep_exports_results(tmp_path, scripted, capsys):
    scripted(up={"10.0.0.2"})
    target = tmp_path / "sweep"
    assert main(["sweep", "10.0.0.0/30", "--timeout", "200", "--export", str(target)]) == 0
    data = json.loads((tmp_path / "sweep.json").read_text(encoding="utf-8"))
    assert data == {
        "networkRange": "10.0.0.0/30",
        "timeout": 200,
        "subnetScanResults": [{"ipAddress": "10.0.0.2"}],
    }
    assert "10.0.0.2" in capsys.readouterr().out


def test_ports_lists_open_ports(scripted, capsys):
    scripted(open_ports={22})
    assert main(["ports", "127.0.0.1", "20", "23"]) == 0
    out = capsys.readouterr().out
    assert "SSH" in out


def test_ping_prints_summary(scripted, capsys):
    scripted(latencies=[(True, 10), (False, 100)])
    assert main(["ping", "127.0.0.1", "--interval", "100", "--count", "2"]) == 0
    out = capsys.readouterr().out
    assert "Packets" in out
    assert "50.00" in out


def test_show_round_trips_export(tmp_path, scripted, capsys):
    scripted(latencies=[(True, 10)])
    path = tmp_path / "ping.json"
    assert main(["ping", "127.0.0.1", "--interval", "100", "--count", "1", "--export", str(path)]) == 0
    capsys.readouterr()
    assert main(["show", str(path)]) == 0
    assert "Response times" in capsys.readouterr().out


def test_show_rejects_malformed_record(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"subnetScanResults": []}), encoding="utf-8")
    assert main(["show", str(path)]) == 2
    assert "Invalid record" in capsys.readouterr().out


def test_invalid_arguments_exit_with_usage_error(scripted):
    scripted()
    with pytest.raises(SystemExit) as excinfo:
        main(["sweep", "10.0.0.0/33"])
    assert excinfo.value.code == 2


def test_show_rejects_undecodable_file(tmp_path, capsys):
    path = tmp_path / "binary.json"
    path.write_bytes(b"\xff\xfe{}")
    assert main(["show", str(path)]) == 2
    assert "Invalid record" in capsys.readouterr().out

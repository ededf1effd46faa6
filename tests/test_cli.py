import json

from sosrelay.cli import main


def test_cli_resolve_static(capsys):
    assert main(["resolve", "--lat", "12.97", "--lon", "77.59", "--strategy", "static", "--json"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["district"] == "bengaluru_urban"
    assert out["provenance"] == "static"
    assert out["topic"] == "district-bengaluru_urban"


def test_cli_resolve_asserted_requires_district(capsys):
    assert main(["resolve", "--lat", "0", "--lon", "0", "--strategy", "asserted"]) == 2
    assert "Missing district" in capsys.readouterr().out


def test_cli_slugify(capsys):
    assert main(["slugify", "São Paulo!", "New Delhi"]) == 0
    assert capsys.readouterr().out.split() == ["sao_paulo", "new_delhi"]


def test_cli_test_alert_reports_delivery_failure(monkeypatch, capsys):
    def fail(self, payload):
        raise RuntimeError("no credentials")

    monkeypatch.setattr("sosrelay.alerts.dispatcher.FirebasePublisher.publish", fail)
    assert main(["test-alert", "--strategy", "static"]) == 1
    assert "no credentials" in capsys.readouterr().out

"""Tests for the command line tool."""

from playtrace.cli import main


class TestCli:
    def test_no_command(self):
        assert main([]) == 1

    def test_send_test_dry_run(self, capsys):
        code = main(["send-test", "--api-key", "k", "--dry-run", "--count", "3", "--player-id", "p1"])

        out = capsys.readouterr().out
        assert code == 0
        assert "debug/test_event" in out
        assert "player=p1" in out
        assert "Delivered 3 test events" in out

    def test_send_test_without_key(self, capsys, monkeypatch):
        monkeypatch.delenv("PLAYTRACE_API_KEY", raising=False)
        assert main(["send-test", "--dry-run"]) == 1
        assert "could not be initialized" in capsys.readouterr().err

    def test_check_config(self, tmp_path, capsys):
        path = tmp_path / "playtrace.yaml"
        path.write_text("api_key: secret-key\nbatch_size: 10\n")

        assert main(["check-config", str(path)]) == 0
        out = capsys.readouterr().out
        assert '"batch_size": 10' in out
        assert "secret-key" not in out

    def test_check_config_invalid(self, tmp_path, capsys, monkeypatch):
        monkeypatch.delenv("PLAYTRACE_API_KEY", raising=False)
        path = tmp_path / "playtrace.yaml"
        path.write_text("batch_size: 10\n")

        assert main(["check-config", str(path)]) == 1
        assert "API key" in capsys.readouterr().err

    def test_check_config_missing_file(self, tmp_path):
        assert main(["check-config", str(tmp_path / "nope.yaml")]) == 1

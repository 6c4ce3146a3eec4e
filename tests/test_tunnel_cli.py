import io

import tunnel_cli
from editor_session import NOTIFY_CONFIRM, NOTIFY_ERROR, NOTIFY_INFO, EditorSession
from tunnel_cli import ConsoleNotifier
from tunnel_codec import TunnelRecord

from conftest import SAMPLE_DOCUMENT, backups_of


def _run(config_file, *args):
    return tunnel_cli.main(["--document", str(config_file), *args])


def _rows(config_file):
    return list(EditorSession.open(str(config_file), read_only=True).tunnel_rows())


def test_show_prints_settings_and_numbered_tunnels(config_file, capsys):
    assert _run(config_file, "show") == 0
    out = capsys.readouterr().out
    assert "SshHost" in out and "bastion.example.net" in out
    assert "Tunnels (2):" in out
    assert "[1] 10.0.0.1:3389 -> 127.0.0.1:3389" in out
    assert "[2] 10.0.0.2:22 -> 127.0.0.1:2222" in out
    assert backups_of(config_file) == []


def test_add_saves_and_backs_up(config_file, capsys):
    assert _run(config_file, "add", "db", "5432", "localhost", "15432") == 0
    assert "Configuration saved." in capsys.readouterr().out
    assert _rows(config_file)[-1] == TunnelRecord("db", 5432, "localhost", 15432)

    backups = backups_of(config_file)
    assert len(backups) == 1
    assert backups[0].read_text(encoding="utf-8") == SAMPLE_DOCUMENT


def test_add_invalid_port_fails(config_file, capsys):
    assert _run(config_file, "add", "db", "pg", "localhost", "15432") == 2
    err = capsys.readouterr().err
    assert "ERROR: Remote port must be a whole number" in err
    assert config_file.read_text(encoding="utf-8") == SAMPLE_DOCUMENT


def test_update_uses_one_based_positions(config_file):
    assert _run(config_file, "update", "2", "10.0.0.3", "22", "127.0.0.1", "2223") == 0
    assert _rows(config_file)[1] == TunnelRecord("10.0.0.3", 22, "127.0.0.1", 2223)


def test_update_out_of_range(config_file, capsys):
    assert _run(config_file, "update", "5", "h", "1", "l", "2") == 2
    assert "out of range" in capsys.readouterr().err
    assert config_file.read_text(encoding="utf-8") == SAMPLE_DOCUMENT


def test_remove_with_yes(config_file):
    assert _run(config_file, "--yes", "remove", "1") == 0
    assert _rows(config_file) == [TunnelRecord("10.0.0.2", 22, "127.0.0.1", 2222)]


def test_set_basic_settings(config_file):
    assert _run(config_file, "set", "SshHost=jump.example.org", "HeartbeatIntervalMs=15000") == 0
    basic = EditorSession.open(str(config_file), read_only=True).basic_settings()
    assert basic.ssh_host == "jump.example.org"
    assert basic.heartbeat_ms == "15000"
    assert len(_rows(config_file)) == 2


def test_set_non_numeric_setting_fails(config_file, capsys):
    assert _run(config_file, "set", "SshPort=ssh") == 2
    assert "SSH port must be a whole number" in capsys.readouterr().err
    assert config_file.read_text(encoding="utf-8") == SAMPLE_DOCUMENT


def test_set_unknown_key_fails(config_file, capsys):
    assert _run(config_file, "set", "Password=hunter2") == 2
    assert "unknown setting" in capsys.readouterr().err


def test_missing_document(tmp_path, capsys):
    assert tunnel_cli.main(["--document", str(tmp_path / "missing.config"), "show"]) == 2
    assert "ERROR: Cannot read" in capsys.readouterr().err


def test_editor_config_layout(tmp_path, capsys):
    doc = tmp_path / "custom.xml"
    doc.write_text('<root><settings><entry name="Tunnels" val="a:1:b:2" /></settings></root>', encoding="utf-8")
    cfg = tmp_path / "editor.yaml"
    cfg.write_text(
        "document:\n  section: settings\n  entry_tag: entry\n  key_attribute: name\n  value_attribute: val\n",
        encoding="utf-8",
    )
    assert tunnel_cli.main(["--document", str(doc), "--editor-config", str(cfg), "show"]) == 0
    assert "[1] a:1 -> b:2" in capsys.readouterr().out


def test_console_notifier_confirm_answers():
    out, err = io.StringIO(), io.StringIO()
    assert ConsoleNotifier(out=out, err=err, ask=lambda _prompt: "y")(NOTIFY_CONFIRM, "Remove?") is True
    assert ConsoleNotifier(out=out, err=err, ask=lambda _prompt: "")(NOTIFY_CONFIRM, "Remove?") is False
    assert ConsoleNotifier(assume_yes=True, out=out, err=err)(NOTIFY_CONFIRM, "Remove?") is True


def test_console_notifier_streams():
    out, err = io.StringIO(), io.StringIO()
    notify = ConsoleNotifier(out=out, err=err)
    notify(NOTIFY_INFO, "saved")
    notify(NOTIFY_ERROR, "broken")
    assert out.getvalue() == "saved\n"
    assert err.getvalue() == "ERROR: broken\n"

import pytest

from editor_config import (
    DEFAULT_BACKUP_SUFFIX,
    DocumentLayout,
    EditorConfig,
    editor_config_from_mapping,
    load_editor_config_from_yaml,
)


def test_no_path_gives_defaults():
    cfg = load_editor_config_from_yaml(None)
    assert cfg == EditorConfig()
    assert cfg.layout == DocumentLayout("appSettings", "add", "key", "value")
    assert cfg.backup.suffix_format == DEFAULT_BACKUP_SUFFIX
    assert cfg.tunnels.warn_on_skipped is False


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "editor.yaml"
    path.write_text("", encoding="utf-8")
    assert load_editor_config_from_yaml(str(path)) == EditorConfig()


def test_overrides(tmp_path):
    path = tmp_path / "editor.yaml"
    path.write_text(
        "document:\n"
        "  section: settings\n"
        "  entry_tag: entry\n"
        "backup:\n"
        "  suffix_format: '.orig_%Y%m%d'\n"
        "tunnels:\n"
        "  warn_on_skipped: true\n",
        encoding="utf-8",
    )
    cfg = load_editor_config_from_yaml(str(path))
    assert cfg.layout.section == "settings"
    assert cfg.layout.entry_tag == "entry"
    assert cfg.layout.key_attribute == "key"
    assert cfg.backup.suffix_format == ".orig_%Y%m%d"
    assert cfg.tunnels.warn_on_skipped is True


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_editor_config_from_yaml(str(tmp_path / "nope.yaml"))


def test_top_level_must_be_mapping(tmp_path):
    path = tmp_path / "editor.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_editor_config_from_yaml(str(path))


@pytest.mark.parametrize(
    "root, message",
    [
        ({"document": ["appSettings"]}, "document must be a mapping"),
        ({"document": {"section": ""}}, "document.section"),
        ({"document": {"entry_tag": 3}}, "document.entry_tag"),
        ({"backup": {"suffix_format": "/tmp/x"}}, "path separators"),
    ],
)
def test_invalid_values(root, message):
    with pytest.raises(ValueError, match=message):
        editor_config_from_mapping(root)

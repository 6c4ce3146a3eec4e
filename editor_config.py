# editor_config.py
#
# YAML -> in-memory config structs for the editor itself.
#
# This file describes *how* to find the settings inside the host document and
# how backups are named. It is never the document being edited.

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml  # pip install pyyaml

DEFAULT_BACKUP_SUFFIX = ".bak_%Y%m%d%H%M%S"


@dataclass
class DocumentLayout:
    """Where the key/value settings live inside the XML host document.

    - section: ElementTree path of the settings element, relative to the root
    - entry_tag: tag of each entry element inside the section
    - key_attribute / value_attribute: attribute names on each entry
    """

    section: str = "appSettings"
    entry_tag: str = "add"
    key_attribute: str = "key"
    value_attribute: str = "value"


@dataclass
class BackupConfig:
    # strftime pattern appended to the document path
    suffix_format: str = DEFAULT_BACKUP_SUFFIX


@dataclass
class TunnelsConfig:
    warn_on_skipped: bool = False


@dataclass
class EditorConfig:
    """Overall editor configuration."""

    layout: DocumentLayout = field(default_factory=DocumentLayout)
    backup: BackupConfig = field(default_factory=BackupConfig)
    tunnels: TunnelsConfig = field(default_factory=TunnelsConfig)


# ---------------------------------------------------------------------------
# Section loaders
# ---------------------------------------------------------------------------


def _section(root: Dict[str, Any], name: str) -> Dict[str, Any]:
    section_any = root.get(name, {})
    if section_any is None:
        return {}
    if not isinstance(section_any, dict):
        raise ValueError(f"{name} must be a mapping")
    return section_any


def _non_empty_str(mapping: Dict[str, Any], dotted: str, key: str, default: str) -> str:
    value = mapping.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{dotted} must be a non-empty string")
    return value.strip()


def load_document_layout(root: Dict[str, Any]) -> DocumentLayout:
    """Load the host document layout from the top-level `document` section.

    Example YAML:

        document:
          section: appSettings
          entry_tag: add
          key_attribute: key
          value_attribute: value
    """

    doc_cfg = _section(root, "document")
    defaults = DocumentLayout()

    return DocumentLayout(
        section=_non_empty_str(doc_cfg, "document.section", "section", defaults.section),
        entry_tag=_non_empty_str(doc_cfg, "document.entry_tag", "entry_tag", defaults.entry_tag),
        key_attribute=_non_empty_str(doc_cfg, "document.key_attribute", "key_attribute", defaults.key_attribute),
        value_attribute=_non_empty_str(
            doc_cfg, "document.value_attribute", "value_attribute", defaults.value_attribute
        ),
    )


def load_backup_config(root: Dict[str, Any]) -> BackupConfig:
    backup_cfg = _section(root, "backup")
    suffix = _non_empty_str(backup_cfg, "backup.suffix_format", "suffix_format", DEFAULT_BACKUP_SUFFIX)
    if "/" in suffix or "\\" in suffix:
        raise ValueError("backup.suffix_format must not contain path separators")
    return BackupConfig(suffix_format=suffix)


def load_tunnels_config(root: Dict[str, Any]) -> TunnelsConfig:
    tunnels_cfg = _section(root, "tunnels")
    return TunnelsConfig(warn_on_skipped=bool(tunnels_cfg.get("warn_on_skipped", False)))


def editor_config_from_mapping(root: Dict[str, Any]) -> EditorConfig:
    return EditorConfig(
        layout=load_document_layout(root),
        backup=load_backup_config(root),
        tunnels=load_tunnels_config(root),
    )


def load_editor_config_from_yaml(path: Optional[str]) -> EditorConfig:
    """Load EditorConfig from a YAML file. No path means all defaults."""

    if not path:
        return EditorConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    root = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(root, dict):
        raise ValueError("Top-level YAML must be a mapping")

    return editor_config_from_mapping(root)

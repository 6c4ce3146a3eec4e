# settings_store.py
"""
Key/value access to the settings section of an XML host document.

The host document is a larger configuration file; only one element of it
(the settings section) is read or written here. Everything else, comments
included, is carried through untouched so a save changes nothing but the
values that were set.

    <configuration>
      <appSettings>
        <add key="SshHost" value="bastion.example.net"/>
        <add key="Tunnels" value="10.0.0.1:3389:127.0.0.1:3389"/>
      </appSettings>
    </configuration>
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from editor_config import DocumentLayout
from errors import StorageIOError, StructuralError

LOG = logging.getLogger(__name__)


class SettingsDocument:
    """A parsed host document plus the layout used to find its settings."""

    def __init__(self, root: ET.Element, layout: Optional[DocumentLayout] = None) -> None:
        self.root = root
        self.layout = layout or DocumentLayout()

    def section(self) -> Optional[ET.Element]:
        if self.root.tag == self.layout.section:
            return self.root
        return self.root.find(self.layout.section)

    def to_bytes(self) -> bytes:
        data = ET.tostring(self.root, encoding="utf-8", xml_declaration=True)
        if not data.endswith(b"\n"):
            data += b"\n"
        return data


def parse_document(data: bytes, layout: Optional[DocumentLayout] = None) -> SettingsDocument:
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True, insert_pis=True))
    try:
        parser.feed(data)
        root = parser.close()
    except ET.ParseError as exc:
        raise StructuralError(f"Document is not well-formed XML: {exc}") from exc
    return SettingsDocument(root, layout)


def load_document(path: str, layout: Optional[DocumentLayout] = None) -> SettingsDocument:
    p = Path(path)
    try:
        data = p.read_bytes()
    except OSError as exc:
        raise StorageIOError(f"Cannot read {p}: {exc}", path=str(p)) from exc

    doc = parse_document(data, layout)
    if doc.section() is None:
        # Reading still works (every get() is absent); writing will not.
        LOG.warning("%s has no <%s> section", p, doc.layout.section)
    return doc


class SettingsStore:
    """Typed accessor over the settings section of a SettingsDocument.

    - get() never fails: a missing section or key is just None.
    - set() creates the entry on first write and updates it in place after
      that. Values are stored verbatim, no validation happens here.
    - Nothing touches storage; see persistence.py for that.
    """

    def __init__(self, document: SettingsDocument) -> None:
        self._doc = document
        self._layout = document.layout

    @property
    def document(self) -> SettingsDocument:
        return self._doc

    def _entries(self) -> List[ET.Element]:
        section = self._doc.section()
        if section is None:
            return []
        return section.findall(self._layout.entry_tag)

    def _find(self, key: str) -> Optional[ET.Element]:
        for entry in self._entries():
            if entry.get(self._layout.key_attribute) == key:
                return entry
        return None

    def get(self, key: str) -> Optional[str]:
        entry = self._find(key)
        if entry is None:
            return None
        return entry.get(self._layout.value_attribute)

    def set(self, key: str, value: str) -> None:
        section = self._doc.section()
        if section is None:
            raise StructuralError(
                f"Document has no <{self._layout.section}> section; cannot set {key}"
            )

        entry = self._find(key)
        if entry is not None:
            entry.set(self._layout.value_attribute, value)
            return

        entry = ET.Element(self._layout.entry_tag)
        entry.set(self._layout.key_attribute, key)
        entry.set(self._layout.value_attribute, value)
        _append_indented(section, entry)
        LOG.debug("Created setting %s", key)

    def keys(self) -> List[str]:
        out: List[str] = []
        for entry in self._entries():
            key = entry.get(self._layout.key_attribute)
            if key is not None:
                out.append(key)
        return out

    def items(self) -> List[Tuple[str, str]]:
        return [(k, self.get(k) or "") for k in self.keys()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._find(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())


def _append_indented(section: ET.Element, entry: ET.Element) -> None:
    # Reuse the surrounding whitespace so a pretty-printed file stays pretty:
    # the new entry takes the closing indent, the old last child takes the
    # per-child indent.
    children = list(section)
    if children:
        last = children[-1]
        entry.tail = last.tail
        last.tail = section.text
    section.append(entry)

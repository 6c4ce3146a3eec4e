import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

from editor_session import NOTIFY_CONFIRM  # noqa: E402

SAMPLE_DOCUMENT = """<?xml version="1.0" encoding="utf-8"?>
<configuration>
  <!-- tunnel client settings -->
  <startup>
    <supportedRuntime version="v4.0" />
  </startup>
  <appSettings>
    <add key="SshHost" value="bastion.example.net" />
    <add key="SshPort" value="22" />
    <add key="SshUser" value="ops" />
    <add key="MaxTunnels" value="5" />
    <add key="HeartbeatIntervalMs" value="30000" />
    <add key="Tunnels" value="10.0.0.1:3389:127.0.0.1:3389,10.0.0.2:22:127.0.0.1:2222" />
  </appSettings>
</configuration>
"""


class RecordingNotifier:
    """Collects notify() calls and answers confirmations with `confirm`."""

    def __init__(self, confirm=True):
        self.confirm = confirm
        self.calls = []

    def __call__(self, kind, message):
        self.calls.append((kind, message))
        if kind == NOTIFY_CONFIRM:
            return self.confirm
        return None

    def kinds(self):
        return [kind for kind, _ in self.calls]


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "app.config"
    path.write_text(SAMPLE_DOCUMENT, encoding="utf-8")
    return path


@pytest.fixture
def notifier():
    return RecordingNotifier()


def backups_of(path):
    return sorted(path.parent.glob(path.name + ".bak_*"))

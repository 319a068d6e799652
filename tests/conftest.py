# tests/conftest.py - shared fixtures
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tab_easymotion.core.tab_collector import Tab, TabGroup, TabKind  # noqa: E402
from tab_easymotion.core.workbench import Workbench  # noqa: E402
from tab_easymotion.utils.logger_utils import Log  # noqa: E402


@pytest.fixture(autouse=True)
def _log_to_tmp(tmp_path):
    """Keep the application log out of the working tree."""
    old_path, old_echo = Log.path, Log.echo
    Log.configure(path=str(tmp_path / "logs" / "test.log"), echo=False)
    yield
    Log.configure(path=old_path, echo=old_echo)


class FakeClock:
    """Millisecond clock the tests move by hand."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def workbench():
    group = TabGroup(
        1,
        [
            Tab("README.md", uri="file:///w/README.md", is_active=True),
            Tab("app.py", uri="file:///w/src/app.py"),
            Tab("app.py (diff)", TabKind.DIFF, uri="file:///w/src/app.py", original="git:/w/src/app.py"),
            Tab("Preview", TabKind.WEBVIEW),
            Tab("bash", TabKind.TERMINAL),
        ],
    )
    return Workbench([group], active_column=1)

# tests/test_tui.py - headless run of the picker
import asyncio

from tab_easymotion.tui_app import HintsScreen, TabEasyMotionApp
from tab_easymotion.core.workbench import demo_workbench
from tab_easymotion.utils.config_manager import Config
from tab_easymotion.utils.usage_store import MemoryStore


def make_app(tmp_path):
    return TabEasyMotionApp(demo_workbench(), Config(str(tmp_path / "config.json")), MemoryStore())


def test_jump_with_hint_keys(tmp_path):
    app = make_app(tmp_path)

    async def scenario():
        async with app.run_test() as pilot:
            await pilot.press("space")
            await pilot.pause(0.2)
            assert isinstance(app.screen, HintsScreen)
            assert len(app.screen.view.entries) == 10

            await pilot.press("s")
            await pilot.pause(0.2)
            assert not isinstance(app.screen, HintsScreen)

    asyncio.run(scenario())
    assert app.workbench.active_group.active_tab.label == "app.py"


def test_escape_leaves_tabs_alone(tmp_path):
    app = make_app(tmp_path)

    async def scenario():
        async with app.run_test() as pilot:
            await pilot.press("space")
            await pilot.pause(0.2)
            await pilot.press("escape")
            await pilot.pause(0.2)
            assert not isinstance(app.screen, HintsScreen)

    asyncio.run(scenario())
    assert app.workbench.active_group.active_tab.label == "README.md"

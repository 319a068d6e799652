"""
cli.py - command line front end
Commands:
- hints: table of hint codes for the active group, tinted by usage heat
- match BUFFER: how a typed buffer resolves against the current hints
- pick HINT: resolve a hint and activate its tab (records usage)
- usage: retained usage records
- config [KEY VALUE]: show or change options
- tui: interactive picker
Uses Rich for tables and formatting.
"""

import argparse
import sys
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tab_easymotion.controller import LogNotifier, TabEasyMotionController
from tab_easymotion.core.hint_generator import capacity, normalize_alphabet
from tab_easymotion.core.match_engine import compute_match_state
from tab_easymotion.core.usage_tracker import UsageTracker
from tab_easymotion.core.workbench import Workbench, demo_workbench
from tab_easymotion.session.hints_panel import TabHintsPanel
from tab_easymotion.utils.config_manager import Config
from tab_easymotion.utils.formatting import clamp_heat, heat_color, usage_caption
from tab_easymotion.utils.logger_utils import Log
from tab_easymotion.utils.usage_store import STATE_PATH, JsonFileStore

# initialise console for rich output
console = Console()


def _no_view(endpoint) -> None:
    # the CLI never opens an interactive panel
    endpoint.close()


class CLI:
    """Builds the workbench/tracker/controller stack for one command."""

    def __init__(self, args: argparse.Namespace):
        self.args = args
        self.cfg = Config(args.config)
        if getattr(args, "alphabet", None):
            self.cfg.data["hint_alphabet"] = args.alphabet
        if getattr(args, "max_length", None) is not None:
            self.cfg.data["max_hint_length"] = args.max_length

        tabs = getattr(args, "tabs", None)
        self.workbench = Workbench.load(tabs) if tabs else demo_workbench()
        self.tracker = UsageTracker(JsonFileStore(args.state))
        self.tracker.attach(self.workbench, bootstrap=False)
        self.notifier = LogNotifier(console)
        self.controller = TabEasyMotionController(
            self.workbench, TabHintsPanel(_no_view), self.tracker, self.cfg, notifier=self.notifier
        )

    # COMMANDS ----------------------------------------------------------------
    def hints(self) -> int:
        entries = self.controller.prepare_entries()
        if not entries:
            return 1

        table = Table(title="Tab hints", box=box.SIMPLE, show_edge=False)
        table.add_column("Hint", style="bold cyan")
        table.add_column("Title", style="bold")
        table.add_column("Description", style="dim")
        table.add_column("Heat", justify="right")
        table.add_column("Usage", style="dim")

        for e in entries:
            heat = clamp_heat(e.usage_heat)
            table.add_row(
                e.hint.upper(),
                Text(e.title),
                Text(e.description),
                Text(f"{heat:.2f}", style=heat_color(heat)),
                usage_caption(e.usage_count, e.last_activated_at),
            )
        console.print(table)

        settings = self.controller.settings
        cap = capacity(settings.hint_alphabet, settings.max_hint_length)
        console.print(
            f"[dim]alphabet {normalize_alphabet(settings.hint_alphabet)!r} · "
            f"max length {settings.max_hint_length or 'unbounded'} · "
            f"capacity {cap if cap is not None else 'unbounded'}[/dim]"
        )
        return 0

    def match(self, buffer: str) -> int:
        entries = self.controller.prepare_entries()
        if not entries:
            return 1

        state = compute_match_state([e.hint for e in entries], buffer)
        titles = {e.hint: e.title for e in entries}

        table = Table(title=f"Match for '{buffer}'", box=box.MINIMAL)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("phase", state.phase.value)
        table.add_row("candidates", Text(", ".join(f"{c} ({titles[c]})" for c in state.candidates) or "(none)"))
        table.add_row("exact", state.exact or "-")
        table.add_row("sole", state.sole or "-")
        table.add_row("next key", (state.next_char or "-").upper())
        table.add_row("enter selects", state.confirm_target or "-")
        console.print(table)
        return 0 if state.candidates else 2

    def pick(self, hint: str) -> int:
        if not self.controller.prepare_entries():
            return 1
        descriptor = self.controller.handle_hint_selection(hint)
        if descriptor is None:
            return 2
        console.print(f"[green]Switched to[/green] {escape(descriptor.title)}  [dim]({escape(descriptor.description)})[/dim]")
        return 0

    def usage(self) -> int:
        records = self.tracker.records()
        table = Table(title="Tab usage", box=box.MINIMAL)
        table.add_column("Key")
        table.add_column("Count", justify="right")
        table.add_column("Last activated", style="dim")
        for key, rec in records.items():
            table.add_row(Text(key), str(rec["count"]), usage_caption(0, rec["lastActivatedAt"]))
        console.print(table)
        return 0

    def config(self, key: Optional[str], value: Optional[str]) -> int:
        if key is None:
            lines: List[str] = []
            self.cfg.show(out=lines.append)
            console.print(Panel(Text("\n".join(lines)), title="Config", border_style="cyan"))
            return 0
        if value is None:
            console.print("[red]config needs KEY VALUE[/red]")
            return 2
        try:
            self.cfg.set(key, value)
        except (KeyError, ValueError) as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            return 2
        console.print(f"[green]{escape(key)}[/green] = {escape(str(self.cfg.data[key]))}")
        return 0

    def tui(self) -> int:
        from tab_easymotion.tui_app import TabEasyMotionApp

        self.controller.dispose()
        # the app owns the terminal from here
        Log.configure(echo=False)
        TabEasyMotionApp(self.workbench, self.cfg, JsonFileStore(self.args.state)).run()
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tab-easymotion", description="Jump to open tabs by typing short hints.")
    parser.add_argument("--config", default="config.json", help="config file (JSON)")
    parser.add_argument("--state", default=STATE_PATH, help="usage state file (JSON)")
    parser.add_argument("--verbose", action="store_true", help="echo log lines to the console")

    sub = parser.add_subparsers(dest="command")

    def with_tabs(p):
        p.add_argument("--tabs", help="workbench JSON file (defaults to a demo set)")
        p.add_argument("--alphabet", help="override the hint alphabet")
        p.add_argument("--max-length", type=int, dest="max_length", help="override the max hint length (0 = unbounded)")
        return p

    with_tabs(sub.add_parser("hints", help="show hint codes"))
    with_tabs(sub.add_parser("match", help="resolve a typed buffer")).add_argument("buffer")
    with_tabs(sub.add_parser("pick", help="activate the tab behind a hint")).add_argument("hint")
    with_tabs(sub.add_parser("tui", help="interactive picker"))
    sub.add_parser("usage", help="show usage records")
    cfg = sub.add_parser("config", help="show or set options")
    cfg.add_argument("key", nargs="?")
    cfg.add_argument("value", nargs="?")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    Log.configure(echo=args.verbose)
    cli = CLI(args)

    if args.command == "hints":
        return cli.hints()
    if args.command == "match":
        return cli.match(args.buffer)
    if args.command == "pick":
        return cli.pick(args.hint)
    if args.command == "usage":
        return cli.usage()
    if args.command == "config":
        return cli.config(args.key, args.value)
    if args.command == "tui":
        return cli.tui()
    return 0


if __name__ == "__main__":
    sys.exit(main())

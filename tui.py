#!/usr/bin/env python3
"""
Checkout TUI — Terminal-based frontend using Textual.

Type a score, cycle the finishing rule, and browse the ranked checkouts
in a table.
"""
import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Center, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import DataTable, Footer, Header, Input, Static
from textual import on

from board import FinishingRule, describe_rule, max_score, parse_rule, rule_arg
from checkout import format_path
from checkout_tables import checkouts_for, is_bogey, min_throws
from settings import load_settings, save_settings

logger = logging.getLogger(__name__)

RULE_ORDER = [FinishingRule.DOUBLE_OUT, FinishingRule.MASTER_OUT, FinishingRule.SINGLE_OUT]


def summary_text(score, rule, count):
    """One-line status for the current query."""
    if score is None:
        return f"{describe_rule(rule)} — enter a score"
    if score < 1 or score > max_score(rule):
        return f"[red]{score} is out of range (1-{max_score(rule)})[/red]"
    if count == 0:
        label = "bogey number" if is_bogey(score, rule) else "no checkout"
        return f"[red]{score}: {label}[/red] under {describe_rule(rule)}"
    darts = min_throws(score, rule)
    return f"{score}: {count} checkout{'s' if count != 1 else ''}, best in {darts} dart{'s' if darts != 1 else ''}"


# ── Modal Screens ────────────────────────────────────────────────────────────

class HelpScreen(ModalScreen):
    """Help overlay showing key bindings."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close"),
        Binding("question_mark", "dismiss", "Close"),
        Binding("f1", "dismiss", "Close"),
    ]

    def compose(self) -> ComposeResult:
        controls = [
            ("0-9 / Enter", "Type a score and look it up"),
            ("M", "Cycle finishing rule"),
            ("+/-", "Show more / fewer paths"),
            ("D", "Dark mode"),
            ("Esc", "Close overlay / Quit"),
            ("? / F1", "This help screen"),
        ]
        text = "[bold]CONTROLS[/bold]\n\n"
        for key, desc in controls:
            text += f"  {key:<20} {desc}\n"
        text += "\n[dim]Press Esc or ? to close[/dim]"
        yield Center(Static(text, id="help-panel"))


class CheckoutApp(App):
    """Checkout lookup terminal UI application."""

    CSS = """
    Screen {
        layout: vertical;
    }

    #query-bar {
        height: auto;
        padding: 1 2;
    }

    #score-input {
        width: 20;
    }

    #rule-display {
        padding: 1 2;
        width: 1fr;
    }

    #summary-display {
        height: auto;
        padding: 0 2;
    }

    #paths-table {
        height: 1fr;
        margin: 1 2;
    }

    #help-panel {
        padding: 2 4;
        border: thick $accent;
        background: $surface;
        width: 70;
        height: auto;
        max-height: 80vh;
    }
    """

    BINDINGS = [
        Binding("m", "cycle_rule", "Rule", show=True),
        Binding("plus", "more", "+Paths"),
        Binding("equals", "more", "+Paths"),
        Binding("minus", "fewer", "-Paths"),
        Binding("d", "dark", "Dark mode"),
        Binding("question_mark", "help", "Help"),
        Binding("f1", "help", "Help"),
        Binding("escape", "quit_or_close", "Quit"),
    ]

    def __init__(self, rule=None, max_paths=None, score=None, settings_path=None):
        super().__init__()
        self.settings_path = settings_path
        self.settings = load_settings(settings_path)
        self.rule = rule or parse_rule(self.settings["mode"])
        self.max_paths = max_paths or self.settings["max_paths"]
        self.score = score

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="query-bar"):
            yield Input(placeholder="Score", type="integer", id="score-input")
            yield Static("", id="rule-display")
        yield Static("", id="summary-display")
        with Vertical():
            yield DataTable(id="paths-table", cursor_type="row", zebra_stripes=True)
        yield Footer()

    def on_mount(self):
        self.title = "Darts Checkout"
        self.dark_mode = self.settings["dark_mode"]
        self._apply_theme()
        table = self.query_one("#paths-table", DataTable)
        table.add_columns("#", "Darts", "Checkout", "First")
        if self.score is not None:
            self.query_one("#score-input", Input).value = str(self.score)
        self._refresh_display()

    def _refresh_display(self):
        """Re-run the lookup and redraw every widget."""
        paths = checkouts_for(self.score, self.rule) if self.score is not None else ()
        self.query_one("#rule-display", Static).update(
            f"[bold]{describe_rule(self.rule)}[/bold]  (showing up to {self.max_paths})"
        )
        self.query_one("#summary-display", Static).update(
            summary_text(self.score, self.rule, len(paths))
        )
        table = self.query_one("#paths-table", DataTable)
        table.clear()
        for i, path in enumerate(paths[:self.max_paths], start=1):
            table.add_row(str(i), str(path.total_throws), format_path(path), str(path.first.value))

    def _save(self):
        self.settings.update(
            mode=self.rule.value, max_paths=self.max_paths, dark_mode=self.dark_mode
        )
        save_settings(self.settings, self.settings_path)

    # ── Actions ──────────────────────────────────────────────────────────

    @on(Input.Submitted, "#score-input")
    def on_score_submitted(self, event: Input.Submitted):
        try:
            self.score = int(event.value)
        except ValueError:
            logger.debug("Ignoring non-numeric score %r", event.value)
            self.score = None
        self._refresh_display()

    def action_cycle_rule(self):
        idx = RULE_ORDER.index(self.rule)
        self.rule = RULE_ORDER[(idx + 1) % len(RULE_ORDER)]
        self._save()
        self._refresh_display()

    def action_more(self):
        self.max_paths += 5
        self._save()
        self._refresh_display()

    def action_fewer(self):
        self.max_paths = max(1, self.max_paths - 5)
        self._save()
        self._refresh_display()

    def _apply_theme(self):
        self.theme = "textual-dark" if self.dark_mode else "textual-light"

    def action_dark(self):
        self.dark_mode = not self.dark_mode
        self._apply_theme()
        self._save()

    def action_help(self):
        self.push_screen(HelpScreen())

    def action_quit_or_close(self):
        # If any screen is stacked, pop it
        if len(self.screen_stack) > 1:
            self.pop_screen()
        else:
            self.exit()


def main(argv=None):
    """Entry point for the TUI."""
    import argparse
    parser = argparse.ArgumentParser(description="Darts Checkout TUI")
    parser.add_argument("score", nargs="?", type=int, help="Score to look up on start")
    parser.add_argument("--mode", type=rule_arg, default=None,
                        help="single_out, master_out or double_out")
    parser.add_argument("--limit", type=int, default=None, help="Paths to show")
    args = parser.parse_args(argv)

    app = CheckoutApp(rule=args.mode, max_paths=args.limit, score=args.score)
    app.run()


if __name__ == "__main__":
    main()

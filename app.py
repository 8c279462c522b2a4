from __future__ import annotations

import logging
import random
import sys
from typing import Sequence

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import (
    Button,
    Checkbox,
    Footer,
    Header,
    Input,
    Label,
    RadioButton,
    RadioSet,
    Static,
)

from aligner import align
from corpus import CorpusError, CorpusLoader, UsageCategory, WordRecord
from dispatcher import (
    Action,
    AppView,
    ApplySelection,
    Dispatcher,
    NavigateTo,
    Page,
    RequestExit,
)
from keymap import action_for_key
from metrics import summarize
from rendering import segment_text, summary_renderable
from selector import Deprecation, SelectionCriteria
from settings import OPTIONAL_FIELDS, Settings, load_settings, setup_logging


class SettingsScreen(Screen):
    def __init__(self, settings: Settings) -> None:
        super().__init__()
        self.user_settings = settings

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll(id="settings"):
            yield Static("Word selection", id="title")
            yield Label("Usage tiers")
            for category in UsageCategory:
                yield Checkbox(
                    category.label,
                    value=category.label in self.user_settings.tiers,
                    id=f"tier-{category.label}",
                )
            yield Label("Deprecated words")
            with RadioSet(id="deprecation"):
                for choice in Deprecation:
                    yield RadioButton(
                        choice.value,
                        value=choice is self.user_settings.deprecation,
                        id=f"deprecation-{choice.value}",
                    )
            yield Label("Allow words without")
            for name in OPTIONAL_FIELDS:
                yield Checkbox(
                    name,
                    value=name in self.user_settings.allow_missing,
                    id=f"missing-{name}",
                )
            yield Label("Words per session")
            yield Input(str(self.user_settings.sample_size), type="integer", id="count")
            with Horizontal(id="settings-buttons"):
                yield Button("Start", id="start", variant="success")
                yield Button("Quit", id="quit", variant="error")
        yield Footer()

    def criteria(self) -> SelectionCriteria:
        tiers = {
            c.label: self.query_one(f"#tier-{c.label}", Checkbox).value
            for c in UsageCategory
        }
        missing = {
            f"allow_missing_{name}": self.query_one(f"#missing-{name}", Checkbox).value
            for name in OPTIONAL_FIELDS
        }
        pressed = self.query_one("#deprecation", RadioSet).pressed_button
        deprecation = None
        if pressed is not None and pressed.id is not None:
            deprecation = Deprecation(pressed.id.removeprefix("deprecation-"))
        count = self.query_one("#count", Input).value
        sample_size = int(count) if count.strip().isdigit() else 0
        return SelectionCriteria(
            **tiers, deprecation=deprecation, **missing, sample_size=sample_size
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "start":
            self.app.send(ApplySelection(self.criteria()))
        elif event.button.id == "quit":
            self.app.send(RequestExit())


class GameScreen(Screen):
    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="game"):
            yield Static("", id="hint")
            yield Static("", id="target")
        yield Footer()

    def on_mount(self) -> None:
        self.show(self.app.dispatcher.view())

    def on_key(self, event: events.Key) -> None:
        action = action_for_key(event.key, event.character)
        if action is None:
            return
        event.stop()
        event.prevent_default()
        self.app.send(action)

    def show(self, view: AppView) -> None:
        session = view.session
        if not session.words:
            self.query_one("#hint", Static).update("No words match these settings.")
            self.query_one("#target", Static).update("Press Escape to quit.")
            return
        self.query_one("#hint", Static).update(session.hint or "")
        segments = align(session.target_words, session.typed_text)
        self.query_one("#target", Static).update(segment_text(segments))


class ResultsScreen(Screen):
    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="results"):
            yield Static("Session Summary", id="results-title")
            yield Static("", id="results-body")
            with Horizontal(id="results-buttons"):
                yield Button("Again", id="again", variant="success")
                yield Button("Settings", id="settings-page")
                yield Button("Quit", id="quit", variant="error")
        yield Footer()

    def on_mount(self) -> None:
        self.show(self.app.dispatcher.view())

    def show(self, view: AppView) -> None:
        summary = summarize(view.session)
        self.query_one("#results-body", Static).update(summary_renderable(summary))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "again":
            self.app.send(ApplySelection(self.app.last_criteria))
        elif event.button.id == "settings-page":
            self.app.send(NavigateTo(Page.SETTINGS))
        elif event.button.id == "quit":
            self.app.send(RequestExit())


class WordTyperApp(App):
    CSS = """
    #settings, #game, #results {
        padding: 1 2;
    }

    #title, #results-title {
        text-style: bold;
        margin-bottom: 1;
    }

    #hint {
        height: 3;
        color: $text-muted;
    }

    #target {
        border: solid $primary;
        padding: 1;
    }

    #settings-buttons, #results-buttons {
        height: auto;
        margin-top: 1;
    }
    """

    TITLE = "Word Typer"
    BINDINGS = [("escape", "request_exit", "Quit")]

    def __init__(
        self,
        corpus: Sequence[WordRecord],
        settings: Settings,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__()
        self.user_settings = settings
        self.last_criteria = settings.criteria()
        self.dispatcher = Dispatcher(corpus, rng=rng)
        self.shown_page: Page | None = None

    def on_mount(self) -> None:
        if self.user_settings.start:
            self.send(ApplySelection(self.last_criteria))
        else:
            self._redraw()

    def action_request_exit(self) -> None:
        self.send(RequestExit())

    def send(self, action: Action) -> None:
        if isinstance(action, ApplySelection):
            self.last_criteria = action.criteria
        self.dispatcher.dispatch(action)
        self._tick()

    def _redraw(self) -> None:
        self._show(self.dispatcher.view())

    def _tick(self) -> None:
        self.dispatcher.tick()
        self._redraw()
        if self.dispatcher.pending:
            # Follow-up actions run on the next pass of the event loop.
            self.call_later(self._tick)

    def _show(self, view: AppView) -> None:
        if view.should_exit:
            self.exit()
            return
        if view.page is not self.shown_page:
            self.shown_page = view.page
            screen = self._screen_for(view.page)
            if len(self.screen_stack) > 1:
                self.switch_screen(screen)
            else:
                self.push_screen(screen)
            return
        # A screen draws itself on mount; until then it has no widgets.
        if isinstance(self.screen, (GameScreen, ResultsScreen)) and self.screen.is_mounted:
            self.screen.show(view)

    def _screen_for(self, page: Page) -> Screen:
        if page is Page.GAME:
            return GameScreen()
        if page is Page.RESULTS:
            return ResultsScreen()
        return SettingsScreen(self.user_settings)


def main(argv: Sequence[str] | None = None) -> int:
    settings = load_settings(argv)
    setup_logging(settings)

    loader = CorpusLoader(settings.corpus).start()
    try:
        corpus = loader.wait()
    except CorpusError as exc:
        logging.exception("Could not load corpus from %s", settings.corpus)
        print(f"wordtyper: cannot load corpus: {exc}", file=sys.stderr)
        return 1

    WordTyperApp(corpus, settings).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())

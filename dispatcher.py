"""Synchronous action bus.

The dispatcher owns a fixed set of stores and a queue of pending actions.
One ``tick()`` drains the queue, hands every action to every store in
registration order, and collects whatever the stores emit into a fresh
queue that is only processed on the next tick.
"""

from __future__ import annotations

import enum
import logging
import random
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Sequence, Union

from corpus import WordRecord
from selector import SelectionCriteria, select
from session import Clock, Session


class Page(enum.Enum):
    SETTINGS = "settings"
    GAME = "game"
    RESULTS = "results"


@dataclass(frozen=True)
class CharTyped:
    char: str


@dataclass(frozen=True)
class BackspacePressed:
    pass


@dataclass(frozen=True)
class NavigateTo:
    page: Page


@dataclass(frozen=True)
class ApplySelection:
    criteria: SelectionCriteria


@dataclass(frozen=True)
class RequestExit:
    pass


Action = Union[CharTyped, BackspacePressed, NavigateTo, ApplySelection, RequestExit]
Emit = Callable[[Action], None]


class PageStore:
    def __init__(self, page: Page = Page.SETTINGS) -> None:
        self.page = page

    def update(self, action: Action, emit: Emit) -> None:
        if isinstance(action, NavigateTo):
            self.page = action.page


class ExitFlagStore:
    def __init__(self) -> None:
        self.should_exit = False

    def update(self, action: Action, emit: Emit) -> None:
        if isinstance(action, RequestExit):
            self.should_exit = True


class SessionStore:
    def __init__(
        self,
        corpus: Sequence[WordRecord],
        clock: Clock = time.monotonic,
        rng: random.Random | None = None,
    ) -> None:
        self.corpus = corpus
        self.clock = clock
        self.rng = rng
        self.session = Session(clock=clock)

    def update(self, action: Action, emit: Emit) -> None:
        if isinstance(action, ApplySelection):
            records = select(action.criteria, self.corpus, self.rng)
            self.session = Session.build(records, self.clock)
            logging.info("New session with %d words", len(records))
            emit(NavigateTo(Page.GAME))
            return

        was_completed = self.session.completed
        if isinstance(action, CharTyped):
            self.session.type_char(action.char)
        elif isinstance(action, BackspacePressed):
            self.session.backspace()
        if self.session.completed and not was_completed:
            emit(NavigateTo(Page.RESULTS))


@dataclass(frozen=True)
class WordView:
    text: str
    typed: str
    definition: str | None
    duration: float

    @property
    def is_correct(self) -> bool:
        return self.typed == self.text


@dataclass(frozen=True)
class SessionView:
    words: tuple[WordView, ...]
    cursor: int
    completed: bool
    started_at: float | None
    finished_at: float | None
    hint: str | None
    target_words: tuple[str, ...]
    typed_text: str


@dataclass(frozen=True)
class AppView:
    page: Page
    should_exit: bool
    session: SessionView


class Dispatcher:
    def __init__(
        self,
        corpus: Sequence[WordRecord],
        clock: Clock = time.monotonic,
        rng: random.Random | None = None,
        page: Page = Page.SETTINGS,
    ) -> None:
        self.clock = clock
        self._page = PageStore(page)
        self._exit = ExitFlagStore()
        self._session = SessionStore(corpus, clock, rng)
        self._stores = (self._page, self._exit, self._session)
        self._queue: deque[Action] = deque()

    def dispatch(self, action: Action) -> None:
        self._queue.append(action)

    @property
    def pending(self) -> tuple[Action, ...]:
        return tuple(self._queue)

    def tick(self) -> int:
        """Process every queued action once. Returns how many were processed."""
        current, emitted = self._queue, deque()
        self._queue = emitted
        processed = 0
        while current:
            action = current.popleft()
            for store in self._stores:
                store.update(action, emitted.append)
            processed += 1
        return processed

    def view(self) -> AppView:
        """An immutable snapshot of everything a renderer may read."""
        session = self._session.session
        now = self.clock()
        words = tuple(
            WordView(w.text, w.typed, w.definition, w.active_duration(now))
            for w in session.words
        )
        return AppView(
            page=self._page.page,
            should_exit=self._exit.should_exit,
            session=SessionView(
                words=words,
                cursor=session.cursor,
                completed=session.completed,
                started_at=session.started_at,
                finished_at=session.finished_at,
                hint=session.hint(),
                target_words=tuple(session.target_words()),
                typed_text=session.typed_text(),
            ),
        )

from __future__ import annotations

import logging

from dispatcher import Action, BackspacePressed, CharTyped, RequestExit


EXIT_KEYS = frozenset({"escape", "ctrl+c", "ctrl+q"})
NAMED_CHARS = {"space": " ", "enter": "\n"}


def action_for_key(key: str, character: str | None = None) -> Action | None:
    """Translate a terminal key (textual naming) into an action.

    Returns None for keys the engine does not react to.
    """
    if key in EXIT_KEYS:
        return RequestExit()
    if key == "backspace":
        return BackspacePressed()
    if key in NAMED_CHARS:
        return CharTyped(NAMED_CHARS[key])
    if character is not None and len(character) == 1 and character.isprintable():
        return CharTyped(character)
    logging.debug("Ignoring key %r", key)
    return None

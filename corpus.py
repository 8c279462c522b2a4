from __future__ import annotations

import bz2
import enum
import logging
import threading
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests


DEFAULT_CORPUS = Path(__file__).resolve().parent / "data" / "words.toml"
USER_AGENT = "wordtyper/0.1 (python requests)"
U16_MAX = 0xFFFF


class CorpusError(ValueError):
    """Raised when a corpus cannot be read or does not describe valid words."""


class UsageCategory(enum.IntEnum):
    CORE = 0
    COMMON = 1
    UNCOMMON = 2
    OBSCURE = 3
    SANDBOX = 4

    @classmethod
    def parse(cls, name: str) -> UsageCategory:
        try:
            return cls[name.upper()]
        except KeyError:
            raise CorpusError(f"unknown usage category {name!r}") from None

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class WordRecord:
    id: str
    usage_category: UsageCategory
    word: str
    deprecated: bool = False
    ku_data: dict[str, int] | None = None
    pu_verbatim: dict[str, str] | None = None
    commentary: str | None = None
    definitions: str | None = None


Corpus = tuple[WordRecord, ...]


def _require(row: dict, key: str, kind: type, index: int) -> Any:
    if key not in row:
        raise CorpusError(f"word #{index}: missing {key!r}")
    value = row[key]
    if not isinstance(value, kind):
        raise CorpusError(f"word #{index}: {key!r} must be {kind.__name__}")
    return value


def _optional_text(row: dict, key: str, index: int) -> str | None:
    value = row.get(key)
    if value is not None and not isinstance(value, str):
        raise CorpusError(f"word #{index}: {key!r} must be str")
    return value


def _ku_data(row: dict, index: int) -> dict[str, int] | None:
    data = row.get("ku_data")
    if data is None:
        return None
    if not isinstance(data, dict):
        raise CorpusError(f"word #{index}: 'ku_data' must be a table")
    for key, count in data.items():
        # bool is an int subclass; a true/false count is a typo in the source
        if isinstance(count, bool) or not isinstance(count, int) or not 0 <= count <= U16_MAX:
            raise CorpusError(f"word #{index}: ku_data[{key!r}] must be 0..{U16_MAX}")
    return dict(data)


def _pu_verbatim(row: dict, index: int) -> dict[str, str] | None:
    data = row.get("pu_verbatim")
    if data is None:
        return None
    if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
        raise CorpusError(f"word #{index}: 'pu_verbatim' must map to strings")
    return dict(data)


def record_from_dict(row: dict, index: int = 0) -> WordRecord:
    if not isinstance(row, dict):
        raise CorpusError(f"word #{index}: expected a table")
    return WordRecord(
        id=_require(row, "id", str, index),
        usage_category=UsageCategory.parse(_require(row, "usage_category", str, index)),
        word=_require(row, "word", str, index),
        deprecated=_require(row, "deprecated", bool, index),
        ku_data=_ku_data(row, index),
        pu_verbatim=_pu_verbatim(row, index),
        commentary=_optional_text(row, "commentary", index),
        definitions=_optional_text(row, "definitions", index),
    )


def parse_corpus(text: str) -> Corpus:
    """Parse the TOML corpus format: a ``[[words]]`` array of tables."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise CorpusError(f"invalid TOML: {exc}") from exc
    rows = data.get("words")
    if not isinstance(rows, list):
        raise CorpusError("corpus has no [[words]] table array")
    return tuple(record_from_dict(row, i) for i, row in enumerate(rows))


def _decode(raw: bytes, source: str) -> str:
    if source.endswith(".bz2"):
        try:
            raw = bz2.decompress(raw)
        except (OSError, ValueError) as exc:
            raise CorpusError(f"{source}: bad bzip2 data: {exc}") from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CorpusError(f"{source}: not UTF-8: {exc}") from exc


def fetch_corpus_bytes(url: str, timeout: float = 10) -> bytes:
    try:
        response = requests.get(
            url,
            timeout=timeout,
            allow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        raise CorpusError(f"{url}: {exc}") from exc
    return response.content


def sort_by_tier(words: Corpus) -> Corpus:
    """Order records from core to sandbox, keeping file order within a tier."""
    return tuple(sorted(words, key=lambda w: w.usage_category))


def load_corpus(source: str | Path = DEFAULT_CORPUS) -> Corpus:
    """Load a corpus from a local file or an http(s) URL.

    A ``.bz2`` suffix selects bzip2 decompression before parsing.
    """
    source = str(source)
    started = time.perf_counter()
    if source.startswith(("http://", "https://")):
        raw = fetch_corpus_bytes(source)
    else:
        try:
            raw = Path(source).read_bytes()
        except OSError as exc:
            raise CorpusError(f"{source}: {exc.strerror or exc}") from exc
    words = sort_by_tier(parse_corpus(_decode(raw, source)))
    logging.info(
        "Loaded %d words from %s in %.3fs", len(words), source, time.perf_counter() - started
    )
    return words


class CorpusLoader:
    """Loads a corpus on a worker thread; ``wait()`` joins it once."""

    def __init__(self, source: str | Path = DEFAULT_CORPUS) -> None:
        self.source = source
        self._words: Corpus | None = None
        self._error: BaseException | None = None
        self._thread = threading.Thread(target=self._run, name="corpus-loader", daemon=True)

    def start(self) -> CorpusLoader:
        self._thread.start()
        return self

    def _run(self) -> None:
        try:
            self._words = load_corpus(self.source)
        except Exception as exc:
            self._error = exc

    def wait(self) -> Corpus:
        """Block until loading finishes; re-raise the worker's failure."""
        self._thread.join()
        if self._error is not None:
            raise self._error
        if self._words is None:
            raise CorpusError(f"{self.source}: loader finished without a corpus")
        return self._words

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence

from corpus import DEFAULT_CORPUS, UsageCategory
from selector import Deprecation, SelectionCriteria


DEFAULT_COUNT = 25
DEFAULT_TIERS = ("core",)
DEFAULT_LOG_FILE = Path.home() / ".wordtyper" / "wordtyper.log"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
OPTIONAL_FIELDS = ("ku", "pu", "commentary", "definitions")

ENV_CORPUS = "WORDTYPER_CORPUS"
ENV_COUNT = "WORDTYPER_COUNT"
ENV_LOG_LEVEL = "WORDTYPER_LOG_LEVEL"


@dataclass
class Settings:
    corpus: str = str(DEFAULT_CORPUS)
    tiers: tuple[str, ...] = DEFAULT_TIERS
    deprecation: Deprecation = Deprecation.IN_USE
    allow_missing: tuple[str, ...] = OPTIONAL_FIELDS[:-1]
    sample_size: int = DEFAULT_COUNT
    start: bool = False
    log_file: Path = DEFAULT_LOG_FILE
    log_level: str = "INFO"

    def criteria(self) -> SelectionCriteria:
        return SelectionCriteria(
            **{tier: True for tier in self.tiers},
            deprecation=self.deprecation,
            **{f"allow_missing_{name}": True for name in self.allow_missing},
            sample_size=self.sample_size,
        )


def _name_list(choices: Sequence[str]):
    def parse(value: str) -> tuple[str, ...]:
        names = tuple(n.strip().lower() for n in value.split(",") if n.strip())
        unknown = [n for n in names if n not in choices]
        if unknown:
            raise argparse.ArgumentTypeError(
                f"unknown name(s) {', '.join(unknown)}; choose from {', '.join(choices)}"
            )
        return names
    return parse


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def build_parser(environ: Mapping[str, str]) -> argparse.ArgumentParser:
    defaults = Settings()
    tiers = [c.label for c in UsageCategory]
    parser = argparse.ArgumentParser(
        prog="wordtyper",
        description="Typing practice over a sampled word corpus.",
    )
    parser.add_argument(
        "--corpus", default=environ.get(ENV_CORPUS, defaults.corpus),
        help="corpus TOML file (optionally .bz2) or http(s) URL",
    )
    parser.add_argument(
        "--tiers", type=_name_list(tiers), default=defaults.tiers,
        help=f"comma-separated usage tiers ({', '.join(tiers)})",
    )
    parser.add_argument(
        "--deprecation", type=Deprecation, choices=list(Deprecation),
        default=defaults.deprecation, metavar="{in-use,deprecated,both}",
        help="which words to include by deprecation status",
    )
    parser.add_argument(
        "--allow-missing", type=_name_list(OPTIONAL_FIELDS), default=defaults.allow_missing,
        help=f"optional fields words may lack ({', '.join(OPTIONAL_FIELDS)})",
    )
    parser.add_argument(
        "-n", "--count", dest="sample_size", type=_positive_int,
        default=environ.get(ENV_COUNT, str(defaults.sample_size)),
        help="number of words per session",
    )
    parser.add_argument(
        "--start", action="store_true",
        help="skip the settings page and start typing immediately",
    )
    parser.add_argument("--log-file", type=Path, default=defaults.log_file)
    parser.add_argument(
        "--log-level", default=environ.get(ENV_LOG_LEVEL, defaults.log_level),
        choices=LOG_LEVELS, type=str.upper,
    )
    return parser


def load_settings(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    environ = os.environ if environ is None else environ
    parser = build_parser(environ)
    args = parser.parse_args(argv)
    # argparse does not check defaults taken from the environment against choices
    if args.log_level not in LOG_LEVELS:
        parser.error(f"invalid log level {args.log_level!r}")
    return Settings(
        corpus=args.corpus,
        tiers=args.tiers,
        deprecation=args.deprecation,
        allow_missing=args.allow_missing,
        sample_size=args.sample_size,
        start=args.start,
        log_file=args.log_file,
        log_level=args.log_level,
    )


def setup_logging(settings: Settings) -> None:
    # The terminal UI owns stdout, so logs only go to a file.
    settings.log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=settings.log_level,
        format=LOG_FORMAT,
        handlers=[logging.FileHandler(settings.log_file, encoding="utf-8")],
        force=True,
    )

    def excepthook(exctype, value, tb):
        logging.critical("Unhandled exception", exc_info=(exctype, value, tb))
        sys.__excepthook__(exctype, value, tb)

    sys.excepthook = excepthook

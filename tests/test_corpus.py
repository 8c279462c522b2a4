"""Tests for corpus parsing and loading."""

import bz2
from unittest import mock

import pytest
import requests

from corpus import (
    CorpusError,
    CorpusLoader,
    UsageCategory,
    load_corpus,
    parse_corpus,
    record_from_dict,
)


SAMPLE = """
[[words]]
id = "toki"
usage_category = "core"
word = "toki"
deprecated = false
definitions = "to communicate"
ku_data = { toki = 100, rantu = 3 }
pu_verbatim = { en = "VERB to talk" }

[[words]]
id = "kapesi"
usage_category = "sandbox"
word = "kapesi"
deprecated = true
"""


class TestUsageCategory:
    def test_parse(self):
        assert UsageCategory.parse("core") is UsageCategory.CORE
        assert UsageCategory.parse("Sandbox") is UsageCategory.SANDBOX

    def test_parse_unknown(self):
        with pytest.raises(CorpusError):
            UsageCategory.parse("legendary")

    def test_ordering(self):
        assert sorted(UsageCategory, reverse=True)[0] is UsageCategory.SANDBOX
        assert UsageCategory.CORE < UsageCategory.OBSCURE

    def test_label(self):
        assert UsageCategory.UNCOMMON.label == "uncommon"


class TestParseCorpus:
    def test_parse_sample(self):
        words = parse_corpus(SAMPLE)
        assert isinstance(words, tuple)
        assert len(words) == 2
        toki, kapesi = words
        assert toki.usage_category is UsageCategory.CORE
        assert toki.ku_data == {"toki": 100, "rantu": 3}
        assert toki.pu_verbatim == {"en": "VERB to talk"}
        assert toki.definitions == "to communicate"
        assert toki.commentary is None

    def test_all_optional_fields_absent(self):
        kapesi = parse_corpus(SAMPLE)[1]
        assert kapesi.deprecated
        assert kapesi.ku_data is None
        assert kapesi.pu_verbatim is None
        assert kapesi.commentary is None
        assert kapesi.definitions is None

    def test_unknown_keys_ignored(self):
        row = dict(id="a", usage_category="core", word="a", deprecated=False, source_language="x")
        assert record_from_dict(row).word == "a"

    def test_invalid_toml(self):
        with pytest.raises(CorpusError):
            parse_corpus("[[words]\nid=")

    def test_missing_table(self):
        with pytest.raises(CorpusError):
            parse_corpus('title = "words"')

    @pytest.mark.parametrize("row", [
        dict(usage_category="core", word="a", deprecated=False),
        dict(id="a", usage_category="core", word="a"),
        dict(id="a", usage_category="core", word=5, deprecated=False),
        dict(id="a", usage_category="core", word="a", deprecated="no"),
        dict(id="a", usage_category="rare", word="a", deprecated=False),
        dict(id="a", usage_category="core", word="a", deprecated=False, definitions=3),
        dict(id="a", usage_category="core", word="a", deprecated=False, ku_data={"a": 70000}),
        dict(id="a", usage_category="core", word="a", deprecated=False, ku_data={"a": -1}),
        dict(id="a", usage_category="core", word="a", deprecated=False, ku_data={"a": True}),
        dict(id="a", usage_category="core", word="a", deprecated=False, pu_verbatim={"en": 1}),
    ])
    def test_invalid_rows(self, row):
        with pytest.raises(CorpusError):
            record_from_dict(row)

    def test_ku_bounds_inclusive(self):
        row = dict(id="a", usage_category="core", word="a", deprecated=False,
                   ku_data={"a": 0, "b": 65535})
        assert record_from_dict(row).ku_data == {"a": 0, "b": 65535}

    def test_records_are_frozen(self):
        word = parse_corpus(SAMPLE)[0]
        with pytest.raises(AttributeError):
            word.word = "other"


class TestLoadCorpus:
    def test_plain_file(self, tmp_path):
        path = tmp_path / "words.toml"
        path.write_text(SAMPLE, encoding="utf-8")
        assert len(load_corpus(path)) == 2

    def test_bz2_file(self, tmp_path):
        path = tmp_path / "words.toml.bz2"
        path.write_bytes(bz2.compress(SAMPLE.encode("utf-8")))
        assert [w.id for w in load_corpus(path)] == ["toki", "kapesi"]

    def test_bad_bz2(self, tmp_path):
        path = tmp_path / "words.toml.bz2"
        path.write_bytes(b"not compressed")
        with pytest.raises(CorpusError):
            load_corpus(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(CorpusError):
            load_corpus(tmp_path / "nope.toml")

    def test_sorted_by_tier(self, tmp_path):
        rows = [("kapesi", "sandbox"), ("toki", "core"), ("kin", "common"), ("pona", "core")]
        path = tmp_path / "words.toml"
        path.write_text(
            "".join(
                f'[[words]]\nid = "{w}"\nusage_category = "{tier}"\nword = "{w}"\n'
                "deprecated = false\n\n"
                for w, tier in rows
            ),
            encoding="utf-8",
        )
        assert [w.id for w in load_corpus(path)] == ["toki", "pona", "kin", "kapesi"]

    def test_bundled_corpus(self, project_root):
        words = load_corpus(project_root / "data" / "words.toml")
        assert len(words) >= 20
        assert {w.usage_category for w in words} == set(UsageCategory)
        assert len({w.id for w in words}) == len(words)

    def test_url(self):
        response = mock.Mock(content=SAMPLE.encode("utf-8"))
        response.raise_for_status.return_value = None
        with mock.patch("corpus.requests.get", return_value=response) as get:
            words = load_corpus("https://example.org/words.toml")
        assert len(words) == 2
        assert get.call_args.args[0] == "https://example.org/words.toml"
        assert "User-Agent" in get.call_args.kwargs["headers"]

    def test_url_failure(self):
        with mock.patch("corpus.requests.get", side_effect=requests.ConnectionError("down")):
            with pytest.raises(CorpusError):
                load_corpus("http://example.org/words.toml")


class TestCorpusLoader:
    def test_wait_returns_words(self, tmp_path):
        path = tmp_path / "words.toml"
        path.write_text(SAMPLE, encoding="utf-8")
        assert len(CorpusLoader(path).start().wait()) == 2

    def test_wait_reraises(self, tmp_path):
        loader = CorpusLoader(tmp_path / "missing.toml").start()
        with pytest.raises(CorpusError):
            loader.wait()

    def test_wait_without_result(self):
        with mock.patch("corpus.load_corpus", return_value=None):
            loader = CorpusLoader("words.toml").start()
            with pytest.raises(CorpusError, match="without a corpus"):
                loader.wait()

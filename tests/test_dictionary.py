from __future__ import annotations

import pytest

from supernote_export_pipeline.domain.config import ConfigError, DictionaryConfig
from supernote_export_pipeline.domain.dictionary import apply_dictionary


def test_disabled_dictionary_leaves_text_untouched() -> None:
    config = DictionaryConfig(enabled=False, entries={"teh": "the"})

    assert apply_dictionary("teh note", config) == "teh note"


def test_replaces_every_occurrence() -> None:
    config = DictionaryConfig(enabled=True, entries={"teh": "the"})

    assert apply_dictionary("teh cat and teh dog", config) == "the cat and the dog"


def test_longest_key_wins() -> None:
    config = DictionaryConfig(enabled=True, entries={"Super": "X", "Supernote": "Supernote A5X"})

    assert apply_dictionary("Supernote Super", config) == "Supernote A5X X"


def test_replacements_do_not_chain() -> None:
    config = DictionaryConfig(enabled=True, entries={"a": "b", "b": "c"})

    assert apply_dictionary("ab", config) == "bc"


def test_keys_are_literal_not_regex() -> None:
    config = DictionaryConfig(enabled=True, entries={"a.b": "ok"})

    assert apply_dictionary("a.b axb", config) == "ok axb"


def test_empty_key_is_rejected() -> None:
    with pytest.raises(ConfigError):
        DictionaryConfig(enabled=True, entries={"": "x"})

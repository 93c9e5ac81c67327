import pytest

from cmu_phonetics.config import PhoneticsSettings
from cmu_phonetics.core import (
    ARPABET_CONSONANTS,
    ARPABET_VOWELS,
    CMUDictLoader,
    DictionaryLoadError,
    load_engine,
    parse_cmudict_lines,
)

CMUDICT_SAMPLE = """\
;;; # CMUdict  --  Major Version: 0.07
;;; comment lines are ignored

PEST  P EH1 S T
POSTED  P OW1 S T IH0 D
READ  R EH1 D
READ(1)  R IY1 D
RED  R EH1 D
BROKEN
"""


def test_parse_cmudict_lines_strips_variants_and_comments():
    rows = list(parse_cmudict_lines(CMUDICT_SAMPLE.splitlines()))

    assert rows == [
        ("pest", ("P", "EH1", "S", "T")),
        ("posted", ("P", "OW1", "S", "T", "IH0", "D")),
        ("read", ("R", "EH1", "D")),
        ("read", ("R", "IY1", "D")),
        ("red", ("R", "EH1", "D")),
    ]


def test_loader_builds_engine_from_files(tmp_path):
    dict_path = tmp_path / "cmudict-0.7b"
    dict_path.write_text(CMUDICT_SAMPLE, encoding="latin-1")
    ipa_path = tmp_path / "arpabet_to_ipa"
    ipa_path.write_text("P\tp\nEH\tɛ\nS\ts\nT\tt\n", encoding="utf-8")

    engine = CMUDictLoader(dict_path=dict_path, ipa_path=ipa_path).build_engine()

    assert engine.phones_for_word("read") == ["R EH1 D", "R IY1 D"]
    assert engine.homophones_by_word("red") == ["read"]
    assert engine.ipa_for_word("pest") == ["pɛst"]


def test_loader_reads_latin1_dictionary(tmp_path):
    dict_path = tmp_path / "cmudict-0.7b"
    dict_path.write_bytes("CAF\xc9  K AE0 F EY1\n".encode("latin-1"))

    loader = CMUDictLoader(dict_path=dict_path)

    assert loader.load_rows() == (("caf\xe9", ("K", "AE0", "F", "EY1")),)


def test_loader_retries_after_file_creation(tmp_path):
    dict_path = tmp_path / "cmudict-0.7b"
    loader = CMUDictLoader(dict_path=dict_path)

    with pytest.raises(DictionaryLoadError) as excinfo:
        loader.load_rows()

    assert excinfo.value.source == str(dict_path)
    assert loader.loaded is False

    dict_path.write_text("TEST  T EH1 S T\n", encoding="latin-1")

    assert loader.load_rows() == (("test", ("T", "EH1", "S", "T")),)
    assert loader.loaded is True
    assert loader.build_dictionary().lookup("test") == [("T", "EH1", "S", "T")]


def test_missing_ipa_table_raises(tmp_path):
    loader = CMUDictLoader(ipa_path=tmp_path / "missing.tsv")

    with pytest.raises(DictionaryLoadError):
        loader.load_ipa_table()


def test_bundled_ipa_table_covers_reference_sets():
    table = CMUDictLoader().load_ipa_table()

    for token in ARPABET_VOWELS | ARPABET_CONSONANTS:
        assert table.ipa_for_phoneme(token)


def test_load_engine_uses_settings(tmp_path):
    dict_path = tmp_path / "cmudict-0.7b"
    dict_path.write_text(CMUDICT_SAMPLE, encoding="latin-1")

    engine = load_engine(PhoneticsSettings(dict_path=dict_path))

    assert engine.words_by_alliteration("pest") == ["posted"]
    assert engine.ipa_for_word("red") == ["ɹɛd"]
    assert [match.word for match in engine.words_by_weak_consonance("pest")] == [
        "pest",
        "posted",
    ]


def test_load_engine_applies_configured_weak_ratio(tmp_path):
    dict_path = tmp_path / "cmudict-0.7b"
    dict_path.write_text(CMUDICT_SAMPLE, encoding="latin-1")

    engine = load_engine(PhoneticsSettings(dict_path=dict_path, weak_consonance_ratio=0.9))

    assert engine.default_ratio == pytest.approx(0.9)
    assert [match.word for match in engine.words_by_weak_consonance("pest")] == ["pest"]
    assert [match.word for match in engine.words_by_weak_consonance("pest", 0.7)] == [
        "pest",
        "posted",
    ]


@pytest.fixture(scope="module")
def bundled_engine():
    return CMUDictLoader().build_engine()


def test_bundled_dictionary_pest_scenario(bundled_engine):
    assert bundled_engine.phones_for_word("pest") == ["P EH1 S T"]
    assert bundled_engine.stress_for_word("pest") == ["1"]
    assert bundled_engine.rhyming_chunks_for_word("pest") == ["EH1 S T"]
    assert bundled_engine.ipa_for_word("pest") == ["pɛst"]
    assert "pass" in bundled_engine.words_by_alliteration("pest")
    assert "best" in bundled_engine.words_by_rhyme("pest")


def test_bundled_dictionary_is_fully_transliterable(bundled_engine):
    table = bundled_engine.ipa_table
    for entry in bundled_engine.dictionary:
        assert table.ipa_for_phones(entry.phones) is not None

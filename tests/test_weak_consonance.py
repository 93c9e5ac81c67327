import pytest

from cmu_phonetics.core import (
    MIN_WEAK_CONSONANCE_RATIO,
    PhoneticQueryEngine,
    RatioContractError,
    WeakConsonanceMatch,
    weak_consonance_score,
)


def _words(matches):
    return [match.word for match in matches]


def test_score_for_superset_candidate():
    intersection, score = weak_consonance_score(["P", "S", "T"], ["P", "S", "T", "D"])

    assert intersection == ("P", "S", "T")
    assert score == pytest.approx(0.875)


def test_score_collapses_repeated_consonants():
    intersection, score = weak_consonance_score(["R", "K", "R", "D"], ["R", "K", "R", "D"])

    assert intersection == ("R", "K", "D")
    assert score == pytest.approx(0.75)


def test_score_skips_empty_projections():
    assert weak_consonance_score([], ["P"]) is None
    assert weak_consonance_score(["P"], []) is None


def test_weak_consonance_for_pest(engine):
    matches = engine.words_by_weak_consonance("pest", 0.7)

    assert _words(matches) == ["pest", "past", "posted", "pass"]
    posted = matches[2]
    assert posted.intersection == ("P", "S", "T")
    assert posted.score == pytest.approx(0.875)
    assert matches[3].score == pytest.approx((2 / 3 + 1.0) / 2)


def test_results_are_sorted_with_ties_in_discovery_order(engine):
    matches = engine.words_by_weak_consonance("pest", 0.5)
    scores = [match.score for match in matches]

    assert scores == sorted(scores, reverse=True)
    assert _words(matches)[-3:] == ["best", "rest", "arrest"]


def test_raising_ratio_never_adds_results(engine):
    for word in ("pest", "record", "read", "posted"):
        loose = set(engine.words_by_weak_consonance(word, 0.5))
        strict = set(engine.words_by_weak_consonance(word, 0.9))
        assert strict <= loose


def test_full_ratio_matches_strict_consonance(engine):
    for word in ("pest", "read", "posted", "bath"):
        matches = engine.words_by_weak_consonance(word, 1.0)
        assert set(_words(matches)) == set(engine.words_by_strict_consonance(word))


def test_multiple_pronunciations_are_merged_and_ranked(engine):
    matches = engine.words_by_weak_consonance("record", 0.7)

    assert [(match.word, round(match.score, 4)) for match in matches] == [
        ("record", 1.0),
        ("record", 0.875),
        ("read", 0.8333),
        ("red", 0.8333),
        ("reed", 0.8333),
        ("record", 0.75),
        ("read", 0.75),
        ("red", 0.75),
        ("reed", 0.75),
    ]
    assert len(set(matches)) == len(matches)


def test_word_without_consonants_matches_nothing(engine):
    assert engine.words_by_weak_consonance("a", 0.25) == []
    assert engine.words_by_weak_consonance("zyzzyva", 0.5) == []


@pytest.mark.parametrize("ratio", [0.2, 0.0, -1, float("nan"), "0.5", True])
def test_invalid_ratio_is_rejected(engine, ratio):
    with pytest.raises(RatioContractError):
        engine.words_by_weak_consonance("pest", ratio)
    with pytest.raises(RatioContractError):
        engine.words_by_phones_weak_consonance("P EH1 S T", ratio)


def test_ratio_is_checked_before_scanning(engine, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("dictionary scanned")

    monkeypatch.setattr(engine, "_weak_matches", fail)
    monkeypatch.setattr(engine, "_pronunciations", fail)

    with pytest.raises(RatioContractError) as excinfo:
        engine.words_by_weak_consonance("pest", 0.1)

    assert excinfo.value.ratio == 0.1
    assert isinstance(excinfo.value, ValueError)


def test_minimum_ratio_is_accepted(engine):
    matches = engine.words_by_weak_consonance("pest", MIN_WEAK_CONSONANCE_RATIO)

    assert "apple" in _words(matches)
    assert "ptarmigan" in _words(matches)


def test_phones_variant_and_match_serialisation():
    engine = PhoneticQueryEngine.from_rows(
        [("pest", "P EH1 S T"), ("posted", "P OW1 S T IH0 D")]
    )

    matches = engine.words_by_phones_weak_consonance("P EH1 S T", 0.7)

    assert matches == [
        WeakConsonanceMatch("pest", ("P", "S", "T"), 1.0),
        WeakConsonanceMatch("posted", ("P", "S", "T"), 0.875),
    ]
    assert matches[1].as_dict() == {
        "word": "posted",
        "intersection": ["P", "S", "T"],
        "score": 0.875,
    }


def test_matches_differing_only_in_consonant_order_count_once():
    engine = PhoneticQueryEngine.from_rows(
        [("sat", "S AE1 T"), ("sit", "S IH1 T"), ("sit", "T IH1 S")]
    )

    matches = engine.words_by_weak_consonance("sat", 1.0)

    assert _words(matches) == ["sat", "sit"]
    assert matches[1].intersection == ("S", "T")
    assert _words(engine.words_by_phones_weak_consonance("S AH1 T", 1.0)) == ["sat", "sit"]


def test_omitted_ratio_uses_engine_default(engine):
    assert engine.default_ratio == pytest.approx(0.7)
    assert engine.words_by_weak_consonance("pest") == engine.words_by_weak_consonance(
        "pest", 0.7
    )
    assert engine.words_by_weak_consonance("pest", None) == engine.words_by_weak_consonance(
        "pest"
    )


def test_configured_default_ratio_applies_to_both_variants(sample_rows):
    engine = PhoneticQueryEngine.from_rows(sample_rows, default_ratio=0.9)

    assert _words(engine.words_by_weak_consonance("pest")) == ["pest", "past"]
    assert _words(engine.words_by_phones_weak_consonance("P EH1 S T")) == ["pest", "past"]


def test_engine_rejects_invalid_default_ratio(sample_rows):
    with pytest.raises(RatioContractError):
        PhoneticQueryEngine.from_rows(sample_rows, default_ratio=0.1)

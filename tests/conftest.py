import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cmu_phonetics.core import ArpaToIpaTable, PhoneticQueryEngine, PronunciationDictionary


SAMPLE_ROWS = [
    ("pest", "P EH1 S T"),
    ("pass", "P AE1 S"),
    ("past", "P AE1 S T"),
    ("best", "B EH1 S T"),
    ("rest", "R EH1 S T"),
    ("arrest", "AH0 R EH1 S T"),
    ("posted", "P OW1 S T IH0 D"),
    ("record", "R EH1 K ER0 D"),
    ("record", "R IH0 K AO1 R D"),
    ("read", "R EH1 D"),
    ("read", "R IY1 D"),
    ("red", "R EH1 D"),
    ("reed", "R IY1 D"),
    ("the", "DH AH0"),
    ("the", "DH IY0"),
    ("a", "AH0"),
    ("apple", "AE1 P AH0 L"),
    ("ptarmigan", "T AA1 R M AH0 G AH0 N"),
    ("bath", "B AE1 TH"),
]

SAMPLE_IPA = {
    "P": "p",
    "B": "b",
    "T": "t",
    "D": "d",
    "S": "s",
    "R": "ɹ",
    "K": "k",
    "DH": "ð",
    "EH": "ɛ",
    "AE": "æ",
    "IY": "i",
    "AH0": "ə",
    "AH": "ʌ",
    "ER0": "ɚ",
}


@pytest.fixture
def sample_rows():
    return list(SAMPLE_ROWS)


@pytest.fixture
def dictionary(sample_rows):
    return PronunciationDictionary(sample_rows)


@pytest.fixture
def engine(dictionary):
    """Engine over the small sample dictionary with a partial IPA table."""

    return PhoneticQueryEngine(dictionary, ArpaToIpaTable(SAMPLE_IPA))

"""Data files bundled with :mod:`cmu_phonetics`."""

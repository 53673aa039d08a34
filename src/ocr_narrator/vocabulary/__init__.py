"""Vocabulary module for OCR word correction.

Provides the reference dictionary, edit-distance metrics, and the
memoizing word and fragment correctors.
"""

from ocr_narrator.vocabulary.correction import (
    CorrectionStats,
    FragmentCorrector,
    WordCorrection,
    WordCorrector,
)
from ocr_narrator.vocabulary.dictionary import Dictionary, load_dictionary, read_dictionary_file
from ocr_narrator.vocabulary.distance import edit_distance, similarity

__all__ = [
    "CorrectionStats",
    "Dictionary",
    "FragmentCorrector",
    "WordCorrection",
    "WordCorrector",
    "edit_distance",
    "load_dictionary",
    "read_dictionary_file",
    "similarity",
]

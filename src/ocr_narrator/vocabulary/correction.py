"""Dictionary-based correction of OCR'd words and fragments.

Each word is matched against the reference dictionary by edit distance and
replaced only when the best match is confidently close. Results are memoized
per raw word for the lifetime of the corrector, since the same handful of
words shows up frame after frame while the camera points at one page.
"""

from __future__ import annotations

from dataclasses import dataclass

from ocr_narrator.config import EngineConfig
from ocr_narrator.logging import get_logger
from ocr_narrator.vocabulary.dictionary import Dictionary
from ocr_narrator.vocabulary.distance import edit_distance, similarity

logger = get_logger(__name__)


@dataclass
class WordCorrection:
    """One token of a fragment before and after correction."""

    original: str
    corrected: str
    position: int  # Token index within the fragment

    @property
    def changed(self) -> bool:
        return self.original != self.corrected


@dataclass
class CorrectionStats:
    """Counters describing how a corrector has been spending its time."""

    short_words: int = 0  # Bypassed without lookup
    cache_hits: int = 0
    cache_misses: int = 0  # Each miss is one full dictionary scan
    corrections: int = 0  # Scans that replaced the word

    @property
    def cache_hit_rate(self) -> float:
        lookups = self.cache_hits + self.cache_misses
        return self.cache_hits / lookups if lookups else 0.0

    def to_dict(self) -> dict[str, float]:
        return {
            "short_words": self.short_words,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "corrections": self.corrections,
            "cache_hit_rate": round(self.cache_hit_rate, 3),
        }


class WordCorrector:
    """Maps a raw word to its closest dictionary entry, when close enough.

    The cache is keyed by the raw word exactly as recognized, so "Halo" and
    "halo" are looked up and stored separately even though both are
    compared against the dictionary in lowercase.
    """

    def __init__(self, dictionary: Dictionary, config: EngineConfig | None = None):
        """Initialize corrector.

        Args:
            dictionary: Reference words, fixed for the corrector's lifetime
            config: Thresholds; defaults apply when None
        """
        self._dictionary = dictionary
        self.config = config or EngineConfig()
        self._cache: dict[str, str] = {}
        self.stats = CorrectionStats()

    @property
    def dictionary(self) -> Dictionary:
        return self._dictionary

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def cached(self, word: str) -> str | None:
        """Return the memoized correction for a raw word, if any."""
        return self._cache.get(word)

    def correct(self, word: str) -> str:
        """Correct a single word.

        Args:
            word: Raw word as recognized

        Returns:
            The best dictionary entry if it scores above the correction
            threshold, otherwise `word` unchanged
        """
        if len(word) <= self.config.short_word_max_length:
            self.stats.short_words += 1
            return word

        cached = self._cache.get(word)
        if cached is not None:
            self.stats.cache_hits += 1
            return cached

        self.stats.cache_misses += 1
        lowered = word.lower()
        best = self._closest_entry(lowered)
        score = similarity(best, lowered) if best is not None else 0

        corrected = best if best is not None and score > self.config.correction_threshold else word
        if corrected != word:
            self.stats.corrections += 1
            logger.debug(f"Corrected {word!r} -> {corrected!r}", extra={"score": score})

        self._cache[word] = corrected
        return corrected

    def _closest_entry(self, target: str) -> str | None:
        """First dictionary entry with the minimum edit distance to `target`.

        Entries whose length alone puts them at least as far away as the
        current best are skipped, as they could never replace it.
        """
        best: str | None = None
        best_distance = 0

        for entry in self._dictionary:
            if best is not None and abs(len(entry) - len(target)) >= best_distance:
                continue

            distance = edit_distance(entry, target)
            if best is None or distance < best_distance:
                best, best_distance = entry, distance
                if distance == 0:
                    break

        return best


@dataclass
class FragmentCorrector:
    """Applies a WordCorrector token by token across a text fragment."""

    corrector: WordCorrector
    max_words: int | None = None

    def __post_init__(self) -> None:
        if self.max_words is None:
            self.max_words = self.corrector.config.max_fragment_words

    def correct_tokens(self, text: str) -> list[WordCorrection]:
        """Split on single spaces, cap the token count and correct each token.

        Args:
            text: Raw fragment

        Returns:
            One WordCorrection per retained token, in order
        """
        tokens = text.split(" ")[: self.max_words]
        return [
            WordCorrection(original=token, corrected=self.corrector.correct(token), position=i)
            for i, token in enumerate(tokens)
        ]

    def correct_fragment(self, text: str) -> str:
        """Correct a fragment and re-join it with single spaces.

        Args:
            text: Raw fragment

        Returns:
            Corrected fragment of at most `max_words` tokens
        """
        return " ".join(c.corrected for c in self.correct_tokens(text))

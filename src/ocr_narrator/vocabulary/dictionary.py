"""Reference dictionary loading.

The dictionary is a plain word list, one entry per line, loaded once when a
session starts and read-only afterwards. A missing or unreadable file is not
fatal: the session runs with an empty dictionary and corrects nothing.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import overload

from ocr_narrator.errors import DictionaryError
from ocr_narrator.logging import get_logger

logger = get_logger(__name__)


class Dictionary(Sequence[str]):
    """Immutable, ordered sequence of lowercase reference words.

    Order matters: when two entries are equally close to a misread word,
    the earlier one wins.

    Example:
        dictionary = Dictionary.from_lines(["Kucing", "makan", "", "ikan"])
        list(dictionary)  # ["kucing", "makan", "ikan"]
    """

    __slots__ = ("_words",)

    def __init__(self, words: Iterable[str] = ()):
        self._words: tuple[str, ...] = tuple(words)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "Dictionary":
        """Build a dictionary from raw lines.

        Lines are stripped and lowercased; blank lines are skipped.
        Duplicates are kept.

        Args:
            lines: Raw lines, e.g. from a file

        Returns:
            Dictionary instance
        """
        return cls(word for word in (line.strip().lower() for line in lines) if word)

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[str]: ...

    def __getitem__(self, index):
        return self._words[index]

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __contains__(self, word: object) -> bool:
        return word in self._words

    def __repr__(self) -> str:
        return f"Dictionary({len(self._words)} words)"

    @property
    def is_empty(self) -> bool:
        return not self._words

    def duplicates(self) -> list[str]:
        """Words that appear more than once, in first-repeat order."""
        seen: set[str] = set()
        repeated: dict[str, None] = {}
        for word in self._words:
            if word in seen:
                repeated[word] = None
            seen.add(word)
        return list(repeated)


def read_dictionary_file(path: Path | str) -> Dictionary:
    """Read a dictionary file, one word per line.

    Args:
        path: Path to a UTF-8 text file

    Returns:
        Dictionary instance

    Raises:
        DictionaryError: If the file does not exist or cannot be decoded
    """
    path = Path(path)
    if not path.is_file():
        raise DictionaryError(f"Dictionary file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            return Dictionary.from_lines(f)
    except (OSError, UnicodeDecodeError) as e:
        raise DictionaryError(
            f"Could not read dictionary file: {e}",
            context={"path": str(path)},
        ) from e


def load_dictionary(path: Path | str | None) -> Dictionary:
    """Load a dictionary, degrading to an empty one on failure.

    Args:
        path: Path to the word list, or None when the host has none

    Returns:
        Loaded dictionary, or an empty one if the source is missing,
        unreadable or contains no words
    """
    if path is None:
        logger.warning("No dictionary configured; word correction disabled")
        return Dictionary()

    try:
        dictionary = read_dictionary_file(path)
    except DictionaryError as e:
        logger.warning(f"{e.message}; word correction disabled", extra=e.context)
        return Dictionary()

    if dictionary.is_empty:
        logger.warning(f"Dictionary {path} has no words; word correction disabled")
    else:
        logger.info(f"Loaded {len(dictionary)} dictionary words from {path}")

    return dictionary

"""Bad-word filter backed by a static word list."""

import re
from collections.abc import Iterable
from pathlib import Path

import structlog

from gracebot.core.exceptions import ConfigurationError

logger = structlog.get_logger()

# Apostrophes only join word characters ("it's"); quotes around a word are punctuation.
_TOKEN = re.compile(r"\w+(?:'\w+)*")


def tokenize(text: str) -> list[str]:
    """Split text into case-folded word tokens."""
    return _TOKEN.findall(text.casefold())


class WordListFilter:
    """Detects disallowed words in free text.

    Matching is case-insensitive and works on whole tokens: "bad" matches
    "This is BAD!" but not "badger". Multi-word entries such as "bad word"
    match the same words appearing consecutively.
    """

    def __init__(self, words: Iterable[str]) -> None:
        self.words: list[str] = []
        self._entries: list[tuple[str, tuple[str, ...]]] = []

        for word in words:
            tokens = tuple(tokenize(word))
            if not tokens:
                continue
            self.words.append(word)
            self._entries.append((word, tokens))

    @classmethod
    def from_file(cls, path: str | Path | None) -> "WordListFilter":
        """Load a line-delimited word list. Blank lines and '#' comments are skipped."""
        if not path:
            raise ConfigurationError("Word list path is empty")

        try:
            lines = Path(path).read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read word list: {path}",
                details={"path": str(path), "error": str(e)},
            ) from e

        words = [line.strip() for line in lines if line.strip() and not line.lstrip().startswith("#")]
        word_filter = cls(words)

        if not word_filter.words:
            logger.warning("Word list is empty, filter will accept everything", path=str(path))
        else:
            logger.info("Loaded word list", path=str(path), count=len(word_filter.words))
        return word_filter

    def contains(self, text: str) -> bool:
        """Check whether the text contains any listed word."""
        return bool(self.matches(text, first_only=True))

    def matches(self, text: str, first_only: bool = False) -> list[str]:
        """Get the listed words found in the text, in list order."""
        tokens = tokenize(text)
        if not tokens:
            return []

        token_set = set(tokens)
        found: list[str] = []
        for word, word_tokens in self._entries:
            if len(word_tokens) == 1:
                hit = word_tokens[0] in token_set
            else:
                hit = _contains_run(tokens, word_tokens)
            if hit:
                found.append(word)
                if first_only:
                    break
        return found

    def __len__(self) -> int:
        return len(self.words)


def _contains_run(tokens: list[str], run: tuple[str, ...]) -> bool:
    size = len(run)
    return any(tuple(tokens[i:i + size]) == run for i in range(len(tokens) - size + 1))

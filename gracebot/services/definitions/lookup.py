"""Canned definitions for keywords."""

import json
import re
from collections.abc import Mapping
from pathlib import Path

import structlog

from gracebot.core.exceptions import ConfigurationError

logger = structlog.get_logger()

_QUESTION_PREFIX = re.compile(
    r"^\s*(?:please\s+)?(?:define|what\s+is|what's|whats|what\s+are|meaning\s+of)\s*:?\s+",
    re.IGNORECASE,
)
_ARTICLE = re.compile(r"^(?:a|an|the)\s+", re.IGNORECASE)
_TRAILING = re.compile(r"[\s?!.,;:]+$")


def normalize_term(term: str) -> str:
    return " ".join(term.split()).casefold()


def extract_term(text: str) -> str:
    """Pull the keyword out of a question like "What is a bot?"."""
    term = _QUESTION_PREFIX.sub("", text, count=1)
    term = _TRAILING.sub("", term)
    if term != text:
        term = _ARTICLE.sub("", term.strip(), count=1)
    return term.strip()


class DefinitionLookup:
    """Maps keywords to human-readable definitions.

    Keys are case-insensitive and whitespace-normalised; when two source keys
    normalise to the same term, the later one wins.
    """

    def __init__(self, definitions: Mapping[str, str]) -> None:
        self._definitions: dict[str, str] = {}
        for key, value in definitions.items():
            self._definitions[normalize_term(key)] = value

    @classmethod
    def from_file(cls, path: str | Path | None) -> "DefinitionLookup":
        """Load definitions from a JSON object of keyword -> definition."""
        if not path:
            raise ConfigurationError("Definitions path is empty")

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read definitions: {path}",
                details={"path": str(path), "error": str(e)},
            ) from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Definitions file is not valid JSON: {path}",
                details={"path": str(path), "error": str(e)},
            ) from e

        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            raise ConfigurationError(
                "Definitions file must be a JSON object of strings",
                details={"path": str(path)},
            )

        logger.info("Loaded definitions", path=str(path), count=len(data))
        return cls(data)

    def lookup(self, term: str) -> str | None:
        """Get the definition for a term, or None if unknown."""
        return self._definitions.get(normalize_term(term))

    def __contains__(self, term: str) -> bool:
        return normalize_term(term) in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

"""Intent classification interface."""

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass
class IntentResult:
    """Result from intent classification."""

    query: str
    top_intent: str
    score: float  # 0 to 1
    intents: dict[str, float] = field(default_factory=dict)
    entities: dict[str, Any] = field(default_factory=dict)


class IntentClassifier(Protocol):
    """Anything that can classify text into an intent."""

    async def classify(self, text: str) -> IntentResult: ...

"""
Text Processing for Legal Case Search.

Turns a raw free-text query into the ordered list of search terms
the ranking engine matches against case fields.
"""

import re
from dataclasses import dataclass
from typing import Any, Optional


# ─── Processing Pipeline ─────────────────────────────────────────────────────

# Only ASCII letters, digits and underscore survive as word characters
_PUNCTUATION = re.compile(r"[^A-Za-z0-9_\s]")


@dataclass(frozen=True)
class TextProcessorConfig:
    """Configuration for the query processing pipeline."""

    min_token_length: int = 3


class TextProcessor:
    """
    Query pipeline for legal search.

    Pipeline stages:
      1. Lowercasing
      2. Punctuation removal
      3. Whitespace tokenization
      4. Length filtering

    Token order and repeats are preserved; there is no stop word
    removal or stemming, so a term matches exactly what the user typed.
    """

    def __init__(self, config: Optional[TextProcessorConfig] = None):
        self.config = config or TextProcessorConfig()

    def normalize(self, text: str) -> str:
        """Lowercase and strip punctuation."""
        return _PUNCTUATION.sub("", text.lower())

    def tokenize(self, text: Any) -> list[str]:
        """
        Extract search terms from a query.

        Args:
            text: Raw query. None, non-string and empty values are
                  accepted and yield no terms.

        Returns:
            Normalized terms, possibly empty.
        """
        if not isinstance(text, str) or not text:
            return []

        tokens = self.normalize(text).split()
        return [t for t in tokens if len(t) >= self.config.min_token_length]


_default_processor = TextProcessor()


def tokenize_query(query: Any) -> list[str]:
    """Tokenize a query with the default pipeline."""
    return _default_processor.tokenize(query)

"""Content filters for inbound activities."""

from gracebot.services.filters.word_list import WordListFilter, tokenize

__all__ = ["WordListFilter", "tokenize"]

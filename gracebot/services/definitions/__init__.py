"""Keyword definition lookup."""

from gracebot.services.definitions.lookup import DefinitionLookup, extract_term

__all__ = ["DefinitionLookup", "extract_term"]

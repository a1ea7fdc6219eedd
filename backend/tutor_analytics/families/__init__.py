"""
Per-family adapters and their registry.
"""
from typing import Dict

from libs.domain_types import TestFamily

from tutor_analytics.core.exceptions import UnknownTestFamilyError

from .base import FamilyAdapter
from .generic import GenericAdapter
from .punctuation import PunctuationAdapter
from .spelling import SpellingAdapter
from .stress import StressAdapter

ADAPTERS: Dict[TestFamily, FamilyAdapter] = {
    adapter.family: adapter
    for adapter in (
        SpellingAdapter(),
        PunctuationAdapter(),
        StressAdapter(),
        GenericAdapter(),
    )
}


def get_adapter(family: TestFamily) -> FamilyAdapter:
    """
    Return the adapter of a test family.

    Raises:
        UnknownTestFamilyError: If no adapter is registered for ``family``
    """
    try:
        return ADAPTERS[family]
    except KeyError as e:
        raise UnknownTestFamilyError(family) from e


__all__ = [
    "ADAPTERS",
    "FamilyAdapter",
    "GenericAdapter",
    "PunctuationAdapter",
    "SpellingAdapter",
    "StressAdapter",
    "get_adapter",
]

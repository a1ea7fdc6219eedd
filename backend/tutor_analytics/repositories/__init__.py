"""
Collaborator protocols and the in-memory implementations.
"""
from .memory import InMemoryFamilyRepository, InMemorySchoolRepository
from .protocols import FamilyRepository, SchoolRepository

__all__ = [
    "FamilyRepository",
    "SchoolRepository",
    "InMemoryFamilyRepository",
    "InMemorySchoolRepository",
]

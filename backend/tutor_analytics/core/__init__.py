"""
Core module for the analytics components and engine utilities.

The component modules are not imported at package level to keep the import
graph acyclic (they import schemas and models, which stay free of core).
Import them directly: from tutor_analytics.core.aggregation import ...
"""
from .config import settings

__all__ = ["settings"]

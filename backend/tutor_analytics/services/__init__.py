"""
Service layer: entry points of the analytics engine.
"""
from .report_service import ReportService

__all__ = ["ReportService"]

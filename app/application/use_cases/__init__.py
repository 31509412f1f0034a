"""Application use cases: one entry point per workflow."""

from app.application.use_cases.reference_data import ReferenceDataService

__all__ = ["ReferenceDataService"]

"""Service layer entrypoints for domain logic."""

from .benefits_cost import BenefitsCostService
from .imports import ImportService

__all__ = [
    "BenefitsCostService",
    "ImportService",
]

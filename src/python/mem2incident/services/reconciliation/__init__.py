from .reconciliation_service import ReconciliationService

__all__ = [
    "ReconciliationService",
]

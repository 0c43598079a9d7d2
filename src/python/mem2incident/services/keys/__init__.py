from .key_classifier_service import KeyClassifierService

__all__ = [
    "KeyClassifierService",
]

from .payload_normalizer_service import PayloadNormalizerService

__all__ = [
    "PayloadNormalizerService",
]

from .related_pairs import RelatedPairIndex

__all__ = ("RelatedPairIndex",)

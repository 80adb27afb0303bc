from .cascade import DiscoveryCascade, default_resolvers, validate_batch
from .extractor import StructuredExtractor, parse_extraction
from .reconcile import AUGMENT_POLICY, REENRICH_POLICY, classify_skills, reconcile

__all__ = [
    "DiscoveryCascade",
    "default_resolvers",
    "validate_batch",
    "StructuredExtractor",
    "parse_extraction",
    "AUGMENT_POLICY",
    "REENRICH_POLICY",
    "classify_skills",
    "reconcile",
]

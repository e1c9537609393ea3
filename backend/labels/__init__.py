"""Level-of-detail neighborhood labels."""

from .catalog import (
    BOROUGH_LABELS,
    MAJOR_NTA_CODES,
    NtaCentroid,
    build_label_entities,
    load_nta_centroids,
)
from .controller import LabelController, classify_tier
from .layer import LabelLayer, NullLabelLayer
from .types import LabelEntity, Tier

__all__ = [
    "BOROUGH_LABELS",
    "LabelController",
    "LabelEntity",
    "LabelLayer",
    "MAJOR_NTA_CODES",
    "NtaCentroid",
    "NullLabelLayer",
    "Tier",
    "build_label_entities",
    "classify_tier",
    "load_nta_centroids",
]

"""
Keyword classification of provider candidates into landmark types.
"""
from __future__ import annotations

from typing import Optional, Sequence, Tuple

from domain.models import LandmarkType

# (type, title keywords, description keywords), checked in order; first match wins.
CLASSIFICATION_RULES: Sequence[Tuple[LandmarkType, Tuple[str, ...], Tuple[str, ...]]] = (
    (LandmarkType.MUSEUMS, ("museum",), ("museum",)),
    (LandmarkType.PARKS_AND_NATURE, ("park", "garden"), ("park",)),
    (LandmarkType.ARCHITECTURE, ("bridge", "building", "tower"), ()),
)


def classify_landmark(title: str, description: Optional[str] = None) -> LandmarkType:
    """
    Map a title (and optional description) onto a LandmarkType.

    Matching is a case-insensitive substring test. "City Museum and Park" is a
    museum because the museum rule is checked first.
    """
    title_lower = (title or "").lower()
    desc_lower = (description or "").lower()
    for landmark_type, title_words, desc_words in CLASSIFICATION_RULES:
        if any(w in title_lower for w in title_words):
            return landmark_type
        if desc_lower and any(w in desc_lower for w in desc_words):
            return landmark_type
    return LandmarkType.HISTORICAL_SITES

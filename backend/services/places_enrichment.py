from __future__ import annotations

import logging
from typing import Iterable, List

from domain.errors import BackgroundEnrichmentError
from domain.models import Landmark

logger = logging.getLogger(__name__)


def backfill_landmarks(store, client, landmarks: Iterable[Landmark]) -> List[Landmark]:
    """
    Replace the basic provider blurb on freshly created landmarks with the
    Wikipedia summary and thumbnail.

    Runs after the response has been sent. Each landmark is handled on its own;
    a failure is logged and skipped, never retried and never raised.
    Returns the landmarks that were updated.
    """
    updated: List[Landmark] = []
    for landmark in landmarks:
        try:
            summary = client.fetch_summary(landmark.title)
            fields = {
                "description": summary.extract or landmark.description,
                "image_url": summary.image_url or landmark.image_url,
            }
            updated.append(store.upsert(fields, landmark_id=landmark.id))
        except Exception as exc:
            err = BackgroundEnrichmentError(landmark.id, landmark.title, exc)
            logger.warning("%s", err)
            continue
    logger.debug("backfill_landmarks: updated %d landmarks", len(updated))
    return updated

"""
moodlog.preview — Sample data for demos and screenshots.
"""

from __future__ import annotations

import random
from datetime import timedelta
from typing import List, Optional

from moodlog.core.types import MOOD_MAX, MOOD_MIN, MoodRecord, now_local
from moodlog.store import MoodStore


def populate_preview(
    store: MoodStore, days: int = 10, seed: Optional[int] = None
) -> List[MoodRecord]:
    """Insert one random record per day for the last *days* days.

    Returns the created records, newest first.
    """
    rng = random.Random(seed)
    now = now_local()
    created = []
    for i in range(days):
        created.append(
            store.create(
                mood_value=rng.randint(MOOD_MIN, MOOD_MAX),
                note=f"Sample note {i}",
                timestamp=now - timedelta(days=i),
            )
        )
    return created

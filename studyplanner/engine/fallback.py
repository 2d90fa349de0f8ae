"""Fallback content for blocks with no real assignment."""

import random
from typing import Dict, List, Optional, Union

from studyplanner.models.family import Family
from studyplanner.models.schedule_block import FallbackContent
from studyplanner.models.constants import FALLBACKS


def get_fallback(
    family: Union[Family, str],
    rng: Optional[random.Random] = None,
    fallbacks: Dict[Family, List[Dict[str, object]]] = FALLBACKS,
) -> FallbackContent:
    """Pick filler content for a family.

    Families with several candidates pick one uniformly at random. Unknown
    families get the Study Hall filler.

    Args:
        family: Family to pick filler for
        rng: Optional random source (module-level random by default)
        fallbacks: Family -> candidate {title, minutes} entries

    Returns:
        FallbackContent with is_fallback=True
    """
    try:
        family = Family(family)
    except ValueError:
        family = Family.STUDY_HALL
    if not fallbacks.get(family):
        family = Family.STUDY_HALL

    candidates = fallbacks[family]
    entry = candidates[0] if len(candidates) == 1 else (rng or random).choice(candidates)
    return FallbackContent(
        title=str(entry["title"]),
        minutes=int(entry["minutes"]),
        family=family,
    )

"""Taste synthesis: fold per-image aesthetic descriptions into one profile.

Each field is tallied across every description and ranked by descending
count. Ties keep first-seen order (Counter preserves insertion order and
most_common is stable), so the result only depends on input order where two
items are equally frequent.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from designirl.models.domain import AestheticDescription, TasteProfile

TOP_COLORS = 5
TOP_TEXTURES = 5
TOP_MOODS = 2


def _top(counts: Counter[str], limit: int) -> list[str]:
    return [item for item, _ in counts.most_common(limit)]


def synthesize_profile(analyses: Sequence[AestheticDescription]) -> TasteProfile:
    """Combine N descriptions into a TasteProfile. ``analyses`` must be non-empty."""
    if not analyses:
        raise ValueError("synthesize_profile needs at least one analysis")

    colors: Counter[str] = Counter()
    textures: Counter[str] = Counter()
    moods: Counter[str] = Counter()

    for analysis in analyses:
        colors.update(analysis.palette)
        textures.update(analysis.materials)
        moods[analysis.mood] += 1  # one mood per image

    return TasteProfile(
        colors=_top(colors, TOP_COLORS),
        textures=_top(textures, TOP_TEXTURES),
        moods=_top(moods, TOP_MOODS),
    )

"""Summary statistics derived from the crew and cleanup collections."""

from __future__ import annotations

from typing import Iterable

from .models import Cleanup, Crew, Stats


class StatsAggregator:
    """Pure derivation of :class:`Stats`.

    Stats are recomputed from scratch after every collection change and never
    patched in place, so they cannot drift from the collections.
    """

    @staticmethod
    def compute(crews: Iterable[Crew], cleanups: Iterable[Cleanup]) -> Stats:
        total_cleanups = 0
        total_crew = 0
        for crew in crews:
            total_cleanups += crew.completed_cleanups
            total_crew += crew.members

        plastic_collected = 0.0
        beaches_clean = 0
        for cleanup in cleanups:
            plastic_collected += cleanup.plastic_target
            beaches_clean += 1

        return Stats(
            total_cleanups=total_cleanups,
            total_crew=total_crew,
            plastic_collected=plastic_collected,
            beaches_clean=beaches_clean,
        )


def compute_stats(crews: Iterable[Crew], cleanups: Iterable[Cleanup]) -> Stats:
    return StatsAggregator.compute(crews, cleanups)

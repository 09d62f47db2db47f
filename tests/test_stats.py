import pytest

from shoresquad.shared.domain.models import Stats
from shoresquad.shared.domain.stats import StatsAggregator, compute_stats

from .conftest import make_cleanup, make_crew


def test_seed_scenario(seed):
    stats = StatsAggregator.compute(seed.crews, seed.cleanups)

    assert stats.total_crew == 60
    assert stats.total_cleanups == 25
    assert stats.plastic_collected == 272
    assert stats.beaches_clean == 3


def test_empty_collections_give_zero_stats():
    assert compute_stats([], []) == Stats()


@pytest.mark.parametrize(
    "members, completed, targets",
    [
        ([0], [0], []),
        ([3, 4, 5], [1, 0, 7], [12.5, 0.5]),
        ([100] * 50, [2] * 50, [1.0] * 200),
    ],
)
def test_stats_are_sums_of_collections(members, completed, targets):
    crews = [make_crew(str(i), members=m, completed=c) for i, (m, c) in enumerate(zip(members, completed))]
    cleanups = [make_cleanup(str(i), plastic_target=t) for i, t in enumerate(targets)]

    stats = compute_stats(crews, cleanups)

    assert stats.total_crew == sum(members)
    assert stats.total_cleanups == sum(completed)
    assert stats.plastic_collected == pytest.approx(sum(targets))
    assert stats.beaches_clean == len(targets)


def test_compute_accepts_generators_and_is_deterministic(seed):
    first = compute_stats((c for c in seed.crews), (c for c in seed.cleanups))
    second = compute_stats(seed.crews, seed.cleanups)
    assert first == second

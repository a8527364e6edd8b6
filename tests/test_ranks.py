from datetime import timedelta

from streakkeeper.ranks.catalog import DEFAULT_RANK_SYSTEMS, seed_rank_systems
from streakkeeper.ranks.resolver import CURRENT, NEXT, NO_RANK, Rank, resolve_rank
from streakkeeper.ranks.table import RankTable


def test_current_and_next_rank_after_ten_days(rank_table, now):
    start = now - timedelta(days=10)

    assert resolve_rank(rank_table, start, "quarterly", CURRENT, now=now) == (30, "month")
    assert resolve_rank(rank_table, start, "quarterly", NEXT, now=now) == (90, "quarter")


def test_threshold_is_inclusive(rank_table, now):
    start = now - timedelta(days=7)
    assert resolve_rank(rank_table, start, "quarterly", now=now) == Rank(7, "week")


def test_partial_days_are_truncated(rank_table, now):
    # 7 days 23 hours is still day 7
    start = now - timedelta(days=7, hours=23)
    assert resolve_rank(rank_table, start, "quarterly", now=now).label == "week"


def test_next_rank_on_top_tier_is_clamped(rank_table, now):
    start = now - timedelta(days=60)

    current = resolve_rank(rank_table, start, "quarterly", CURRENT, now=now)
    upcoming = resolve_rank(rank_table, start, "quarterly", NEXT, now=now)

    assert current == (90, "quarter")
    assert upcoming == current
    assert rank_table.is_top_tier("quarterly", current.threshold)
    assert not rank_table.is_top_tier("quarterly", 30)


def test_beyond_last_threshold_returns_sentinel(rank_table, now):
    start = now - timedelta(days=91)
    assert resolve_rank(rank_table, start, "quarterly", now=now) == NO_RANK
    assert resolve_rank(rank_table, start, "quarterly", now=now) == (0, "")


def test_lookup_is_case_insensitive(rank_table, now):
    start = now - timedelta(days=2)
    assert resolve_rank(rank_table, start, "QuArTeRlY", now=now).label == "week"


def test_unknown_or_unset_rank_system(rank_table, now):
    assert resolve_rank(rank_table, now, "nope", now=now) == NO_RANK
    assert resolve_rank(rank_table, now, None, now=now) == NO_RANK


def test_table_orders_levels_once(rank_table):
    ladder = rank_table.get("quarterly")
    assert ladder.thresholds == (7, 30, 90)
    assert rank_table.names() == ["quarterly", "duo"]


def test_describe_previews_and_full_ladder(rank_table):
    preview = rank_table.describe(preview=2)
    assert [p["name"] for p in preview] == ["quarterly", "duo"]
    assert [lvl["days"] for lvl in preview[0]["levels"]] == [7, 30]
    assert preview[0]["truncated"] is True
    assert preview[1]["truncated"] is False

    full = rank_table.describe("Quarterly")
    assert [lvl["label"] for lvl in full[0]["levels"]] == ["week", "month", "quarter"]
    assert rank_table.describe("missing") == []


def test_seeded_catalog_loads_into_table(db):
    assert seed_rank_systems(db) == len(DEFAULT_RANK_SYSTEMS)
    assert seed_rank_systems(db) == 0

    table = RankTable.load(db)

    assert sorted(table.names()) == sorted(DEFAULT_RANK_SYSTEMS)
    classic = table.get("classic")
    assert classic.thresholds == tuple(sorted(DEFAULT_RANK_SYSTEMS["classic"]["levels"]))
    assert classic.display_name == "Classic"

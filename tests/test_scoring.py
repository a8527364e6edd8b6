from datetime import timedelta

from streakkeeper.journey.scoring import calculate_score
from conftest import OTHER_USER, USER, days_ago


def test_no_history_scores_zero(db, now):
    assert calculate_score(db, USER, all_journeys=True, now=now) == 0
    assert calculate_score(db, USER, all_journeys=False, now=now) == 0


def test_all_history_adds_days_tasks_and_entries(db, now, catalog, add_journey, add_entry, add_task):
    task_a, task_b = catalog
    add_journey(days_ago(now, 30), end=days_ago(now, 20))   # 10 days
    add_journey(days_ago(now, 4))                           # open, 4 days
    add_task(task_a, days_ago(now, 25))
    add_task(task_b, days_ago(now, 1), is_done=False)
    add_entry(days_ago(now, 22))
    add_entry(days_ago(now, 2))

    # (10 + 4) * 2 + 3 + 5 + 2
    assert calculate_score(db, USER, all_journeys=True, now=now) == 38


def test_current_journey_only_counts_since_start(db, now, catalog, add_journey, add_entry, add_task):
    task_a, task_b = catalog
    add_journey(days_ago(now, 30), end=days_ago(now, 20))
    add_journey(days_ago(now, 4))
    add_task(task_a, days_ago(now, 25))                     # before start
    add_task(task_b, days_ago(now, 3), updated_at=days_ago(now, 1))
    add_entry(days_ago(now, 22))                            # before start
    add_entry(days_ago(now, 2))

    # 4 * 2 + 5 + 1
    assert calculate_score(db, USER, all_journeys=False, now=now) == 14


def test_closed_journeys_only_give_no_current_score(db, now, add_journey, add_entry):
    add_journey(days_ago(now, 9), end=days_ago(now, 1))
    add_entry(days_ago(now, 0, hours=1))

    assert calculate_score(db, USER, all_journeys=False, now=now) == 0
    assert calculate_score(db, USER, all_journeys=True, now=now) == 8 * 2 + 1


def test_day_count_truncates(db, now, add_journey):
    add_journey(now - timedelta(hours=47))
    assert calculate_score(db, USER, all_journeys=True, now=now) == 2


def test_score_grows_while_journey_stays_open(db, now, add_journey):
    add_journey(days_ago(now, 2))

    scores = [
        calculate_score(db, USER, all_journeys=True, now=now + timedelta(days=d))
        for d in range(5)
    ]

    assert scores == sorted(scores)
    assert scores[-1] - scores[0] == 8


def test_score_is_read_only_and_per_user(db, now, catalog, add_journey, add_task):
    add_journey(days_ago(now, 3))
    add_journey(days_ago(now, 50), user_id=OTHER_USER)
    add_task(catalog[0], days_ago(now, 1))

    first = calculate_score(db, USER, all_journeys=True, now=now)
    second = calculate_score(db, USER, all_journeys=True, now=now)

    assert first == second == 3 * 2 + 3
    assert not db.dirty and not db.new

import random
from datetime import timedelta

import pytest

from streakkeeper.core.errors import NotFoundError, QuotaExceededError
from streakkeeper.journey.lifecycle import start_journey
from streakkeeper.journey.scoring import calculate_score
from streakkeeper.tasks.assignment import (
    complete_task,
    count_tasks_today,
    get_undone_task,
    link_task_message,
    request_task,
)
from conftest import OTHER_USER, USER


def test_request_assigns_random_catalog_task(db, now, catalog):
    assignment = request_task(db, USER, message_ref=77, now=now, rng=random.Random(3))

    assert assignment.created is True
    assert assignment.definition in catalog
    assert assignment.task.task_ref == assignment.definition.id
    assert assignment.task.is_done is False
    assert assignment.task.message_ref == 77


def test_unfinished_task_is_handed_back(db, now, catalog):
    first = request_task(db, USER, now=now)
    again = request_task(db, USER, now=now + timedelta(minutes=1))

    assert again.created is False
    assert again.task.id == first.task.id
    assert get_undone_task(db, USER).id == first.task.id


def test_complete_then_request_creates_a_new_task(db, now, catalog):
    first = request_task(db, USER, now=now)
    result = complete_task(db, USER, now=now + timedelta(minutes=1))

    assert result.task.is_done is True
    assert result.task.updated_at == now + timedelta(minutes=1)
    assert result.points == first.definition.points

    second = request_task(db, USER, now=now + timedelta(minutes=2))
    assert second.created is True
    assert second.task.id != first.task.id


def test_complete_without_open_task(db, now, catalog):
    with pytest.raises(NotFoundError):
        complete_task(db, USER, now=now)

    request_task(db, USER, now=now)
    complete_task(db, USER, now=now + timedelta(minutes=1))

    with pytest.raises(NotFoundError):
        complete_task(db, USER, now=now + timedelta(minutes=2))


def test_daily_quota_and_reset_after_midnight(db, now, catalog):
    t = now
    for _ in range(3):
        request_task(db, USER, now=t)
        complete_task(db, USER, now=t + timedelta(minutes=1))
        t += timedelta(minutes=2)

    assert count_tasks_today(db, USER, t) == 3
    with pytest.raises(QuotaExceededError):
        request_task(db, USER, now=t)

    # other users are not affected
    assert request_task(db, OTHER_USER, now=t).created is True

    tomorrow = now.replace(hour=9) + timedelta(days=1)
    assert request_task(db, USER, now=tomorrow).created is True


def test_empty_catalog(db, now):
    with pytest.raises(NotFoundError):
        request_task(db, USER, now=now)


def test_completed_points_feed_current_score(db, now, catalog):
    start_journey(db, USER, 0, now=now - timedelta(hours=1))
    assignment = request_task(db, USER, now=now, rng=random.Random(1))
    complete_task(db, USER, now=now + timedelta(minutes=5))

    score = calculate_score(db, USER, all_journeys=False, now=now + timedelta(minutes=6))

    assert score == assignment.definition.points


def test_link_task_message(db, now, catalog):
    task = request_task(db, USER, now=now).task

    linked = link_task_message(db, USER, task.id, 991)
    assert linked.message_ref == 991

    with pytest.raises(NotFoundError):
        link_task_message(db, OTHER_USER, task.id, 5)

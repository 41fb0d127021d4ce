from datetime import timedelta

import pytest

from career_coach.core.errors import ForbiddenError, NotFoundError

from conftest import FIXED_NOW, make_candidate


@pytest.fixture
def roadmap(service, users):
    candidate = make_candidate()
    users.save_user(candidate)
    return service.generate(candidate.id)


def test_complete_by_index_stamps_date_and_persists(service, roadmap_store, roadmap, clock):
    clock.now = FIXED_NOW + timedelta(days=2)

    updated = service.set_milestone_status(roadmap.id, 1, True)

    assert updated.milestones[1].completed is True
    assert updated.milestones[1].completion_date == clock.now
    assert updated.updated_at == clock.now
    assert updated.created_at == FIXED_NOW
    assert roadmap_store.get(roadmap.id).milestones[1].completed is True


def test_recompleting_keeps_original_completion_date(service, roadmap, clock):
    service.set_milestone_status(roadmap.id, 0, True)
    first_date = clock.now
    clock.now = FIXED_NOW + timedelta(days=5)

    updated = service.set_milestone_status(roadmap.id, 0, True)

    assert updated.milestones[0].completion_date == first_date
    assert updated.updated_at == clock.now


def test_uncompleting_clears_date(service, roadmap):
    service.set_milestone_status(roadmap.id, 0, True)

    updated = service.set_milestone_status(roadmap.id, 0, False)

    assert updated.milestones[0].completed is False
    assert updated.milestones[0].completion_date is None


@pytest.mark.parametrize("index", [-1, 3, 99, True])
def test_out_of_range_index_is_not_found(service, roadmap_store, roadmap, index):
    with pytest.raises(NotFoundError):
        service.set_milestone_status(roadmap.id, index, True)
    assert not any(m.completed for m in roadmap_store.get(roadmap.id).milestones)


def test_unknown_roadmap_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.set_milestone_status("missing", 0, True)


def test_complete_by_id(service, roadmap):
    target = roadmap.milestones[2]

    updated = service.set_milestone_status_by_id(roadmap.id, target.id, True)

    done = [m for m in updated.milestones if m.completed]
    assert [m.id for m in done] == [target.id]


def test_unknown_milestone_id_is_not_found(service, roadmap):
    with pytest.raises(NotFoundError):
        service.set_milestone_status_by_id(roadmap.id, "nope", True)


def test_other_candidate_cannot_mutate(service, roadmap):
    with pytest.raises(ForbiddenError):
        service.set_milestone_status(roadmap.id, 0, True, actor_id="someone-else")
    with pytest.raises(ForbiddenError):
        service.set_milestone_status_by_id(roadmap.id, roadmap.milestones[0].id, True, actor_id="someone-else")


def test_owner_can_mutate(service, roadmap):
    updated = service.set_milestone_status(roadmap.id, 0, True, actor_id=roadmap.candidate_id)
    assert updated.milestones[0].completed is True


def test_concurrent_updates_last_write_wins(service, roadmap_store, roadmap):
    # A writer holding an old copy overwrites a save made after it read
    stale = roadmap_store.get(roadmap.id)
    service.set_milestone_status(roadmap.id, 0, True)

    stale.milestones[1].completed = True
    roadmap_store.save(stale)

    stored = roadmap_store.get(roadmap.id)
    assert stored.milestones[0].completed is False
    assert stored.milestones[1].completed is True


def test_milestone_ids_are_stable_across_updates(service, roadmap):
    ids = [m.id for m in roadmap.milestones]
    updated = service.set_milestone_status(roadmap.id, 0, True)
    assert [m.id for m in updated.milestones] == ids

import time
import uuid
from datetime import date, timedelta
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.models.match_db import match_crud
from app.models.match_db.match_db import ProfileMatch
from app.models.match_db.match_pair_db import MutualMatch
from app.services.errors import (
    InvalidActionError,
    InvalidInputError,
    MatchActionFailedError,
    ProfileNotFoundError,
    RecommendationTimeoutError,
)
from app.services.matching_config import HardFilters
from conftest import NOW


@pytest.fixture
def groom(make_profile):
    return make_profile(is_bride=False, full_name="Groom")


@pytest.fixture
def bride(make_profile):
    return make_profile(is_bride=True, full_name="Bride")


def ids(items):
    return [item.id for item in items]


# recommendations

def test_recommendations_only_show_other_side(service, make_profile, groom):
    bride_a = make_profile(is_bride=True)
    bride_b = make_profile(is_bride=True)
    make_profile(is_bride=False)
    make_profile(is_bride=True, is_deleted=True)

    items, pagination = service.get_recommended_matches(groom.user_id)

    assert sorted(ids(items)) == sorted([bride_a.id, bride_b.id])
    assert pagination.total == 2
    assert pagination.has_more is False


def test_recommendations_exclude_profiles_already_acted_on(service, make_profile, groom):
    liked = make_profile(is_bride=True)
    passed = make_profile(is_bride=True)
    fresh = make_profile(is_bride=True)

    service.record_match_action(groom.user_id, liked.id, "liked")
    service.record_match_action(groom.user_id, passed.id, "passed")

    items, _ = service.get_recommended_matches(groom.user_id)
    assert ids(items) == [fresh.id]


def test_recommendations_are_ranked_and_projected(service, make_profile, make_preferences, groom):
    make_preferences(groom, preferred_communities=["sunni"], preferred_home_districts=["kozhikode"])
    plain = make_profile(is_bride=True, community="shia", last_login=NOW - timedelta(hours=2))
    match = make_profile(
        is_bride=True, community="sunni", home_district="kozhikode", last_login=NOW - timedelta(days=20)
    )

    items, _ = service.get_recommended_matches(groom.user_id)

    assert ids(items) == [match.id, plain.id]
    assert items[0].match_reasons == ["Community match", "Location match"]
    assert items[1].match_reasons == ["Compatible profile", "Recently active"]
    assert items[0].age == 29
    assert items[0].full_name == match.full_name


def test_recommendations_for_unknown_user(service):
    with pytest.raises(ProfileNotFoundError):
        service.get_recommended_matches(uuid.uuid4())


def test_recommendation_pages_are_stable(service, make_profile, groom):
    brides = [make_profile(is_bride=True, last_login=NOW - timedelta(hours=i)) for i in range(12)]

    seen = []
    for offset in range(0, 15, 5):
        items, pagination = service.get_recommended_matches(groom.user_id, limit=5, offset=offset)
        assert pagination.total == 12
        assert pagination.has_more == (offset + 5 < 12)
        seen.extend(ids(items))

    assert seen == [b.id for b in brides]

    again, _ = service.get_recommended_matches(groom.user_id, limit=5, offset=5)
    assert ids(again) == seen[5:10]


def test_offset_beyond_total_returns_empty_page(service, make_profile, groom):
    make_profile(is_bride=True)

    items, pagination = service.get_recommended_matches(groom.user_id, limit=10, offset=30)

    assert items == []
    assert pagination.total == 1
    assert pagination.has_more is False


def test_age_and_height_filters_keep_unknown_values(service, make_profile, make_preferences, groom):
    make_preferences(groom, min_age_years=25, max_age_years=28, min_height_cm=150, max_height_cm=170)
    in_range = make_profile(is_bride=True, date_of_birth=date(1999, 1, 1), height_cm=160)
    unknown = make_profile(is_bride=True, date_of_birth=None, height_cm=None)
    make_profile(is_bride=True, date_of_birth=date(1990, 1, 1), height_cm=160)
    make_profile(is_bride=True, date_of_birth=date(1999, 1, 1), height_cm=180)

    items, _ = service.get_recommended_matches(groom.user_id)

    assert sorted(ids(items)) == sorted([in_range.id, unknown.id])


def test_categorical_filters_keep_not_mentioned(service, make_profile, make_preferences, groom):
    make_preferences(
        groom,
        preferred_marital_status=["never_married"],
        preferred_education_levels=["post_graduation"],
        accept_physically_challenged=False,
    )
    wanted = make_profile(is_bride=True, marital_status="never_married", highest_education_level="post_graduation")
    silent = make_profile(is_bride=True)
    make_profile(is_bride=True, marital_status="divorced")
    make_profile(is_bride=True, highest_education_level="high_school")
    make_profile(is_bride=True, physically_challenged=True)

    items, _ = service.get_recommended_matches(groom.user_id)

    assert sorted(ids(items)) == sorted([wanted.id, silent.id])


def test_disabled_hard_filters(service, make_profile, make_preferences, groom):
    make_preferences(groom, min_age_years=40, preferred_marital_status=["widowed"])
    make_profile(is_bride=True, marital_status="divorced")
    service.hard_filters = HardFilters(enabled=False)

    items, _ = service.get_recommended_matches(groom.user_id)

    assert len(items) == 1


def test_exclusion_failure_degrades_to_no_exclusions(service, make_profile, groom, monkeypatch):
    acted = make_profile(is_bride=True)
    service.record_match_action(groom.user_id, acted.id, "passed")

    def broken(db, user_id):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(match_crud, "get_matched_profile_ids", broken)

    items, _ = service.get_recommended_matches(groom.user_id)
    assert ids(items) == [acted.id]


def test_recommendation_deadline(service, make_profile, groom, monkeypatch):
    make_profile(is_bride=True)
    slow_fetch = match_crud.get_potential_profiles

    def slow(*args, **kwargs):
        time.sleep(0.05)
        return slow_fetch(*args, **kwargs)

    monkeypatch.setattr(match_crud, "get_potential_profiles", slow)

    with pytest.raises(RecommendationTimeoutError):
        service.get_recommended_matches(groom.user_id, timeout=0.01)


# match actions

def test_one_sided_like_is_not_a_match(service, groom, bride):
    assert service.record_match_action(groom.user_id, bride.id, "liked") is False
    assert match_crud.check_for_mutual_match(service.db, groom.user_id, bride.user_id) is False


def test_mutual_like_creates_symmetric_match(service, groom, bride):
    service.record_match_action(groom.user_id, bride.id, "liked")
    assert service.record_match_action(bride.user_id, groom.id, "liked") is True

    assert match_crud.check_for_mutual_match(service.db, groom.user_id, bride.user_id)
    assert match_crud.check_for_mutual_match(service.db, bride.user_id, groom.user_id)
    assert service.db.query(MutualMatch).count() == 1

    groom_side, _ = service.get_mutual_matches(groom.user_id)
    bride_side, _ = service.get_mutual_matches(bride.user_id)
    assert [m.profile_id for m in groom_side] == [bride.id]
    assert [m.profile_id for m in bride_side] == [groom.id]


def test_repeated_like_keeps_single_action(service, groom, bride):
    service.record_match_action(groom.user_id, bride.id, "liked")
    service.record_match_action(groom.user_id, bride.id, "liked")

    assert service.db.query(ProfileMatch).count() == 1


def test_like_queues_notification_without_internal_ids(service, notifier, groom, bride):
    service.record_match_action(groom.user_id, bride.id, "liked")

    assert notifier.calls == [(str(bride.user_id), groom.id, "Groom")]


def test_non_like_does_not_notify(service, notifier, groom, bride):
    service.record_match_action(groom.user_id, bride.id, "disliked")
    service.update_match_action(groom.user_id, bride.id, "liked")

    assert notifier.calls == []


def test_unreachable_broker_does_not_fail_the_action(service, notifier, groom, bride):
    notifier.broker_down = True
    assert service.record_match_action(groom.user_id, bride.id, "liked") is False
    assert match_crud.get_match_action(service.db, groom.user_id, bride.user_id).status == "liked"


def test_retraction_breaks_match(service, groom, bride):
    service.record_match_action(groom.user_id, bride.id, "liked")
    service.record_match_action(bride.user_id, groom.id, "liked")

    is_mutual, was_broken = service.update_match_action(groom.user_id, bride.id, "disliked")

    assert (is_mutual, was_broken) == (False, True)
    assert service.get_mutual_matches(groom.user_id)[0] == []
    assert service.get_mutual_matches(bride.user_id)[0] == []


def test_update_without_existing_match(service, groom, bride):
    assert service.update_match_action(groom.user_id, bride.id, "passed") == (False, False)


def test_relike_after_retraction_needs_both_sides(service, groom, bride):
    service.record_match_action(groom.user_id, bride.id, "liked")
    service.record_match_action(bride.user_id, groom.id, "liked")
    service.update_match_action(groom.user_id, bride.id, "disliked")

    # the bride's like predates the retraction
    assert service.update_match_action(groom.user_id, bride.id, "liked") == (False, False)
    assert not match_crud.check_for_mutual_match(service.db, groom.user_id, bride.user_id)

    assert service.update_match_action(bride.user_id, groom.id, "liked") == (True, False)
    assert match_crud.check_for_mutual_match(service.db, groom.user_id, bride.user_id)
    assert service.db.query(MutualMatch).count() == 1


def test_liking_an_already_matched_profile_keeps_match(service, groom, bride):
    service.record_match_action(groom.user_id, bride.id, "liked")
    service.record_match_action(bride.user_id, groom.id, "liked")

    assert service.update_match_action(groom.user_id, bride.id, "liked") == (True, False)


def test_invalid_action_writes_nothing(service, groom, bride):
    with pytest.raises(InvalidActionError):
        service.record_match_action(groom.user_id, bride.id, "love")
    with pytest.raises(InvalidActionError):
        service.update_match_action(groom.user_id, bride.id, "")

    assert service.db.query(ProfileMatch).count() == 0


@pytest.mark.parametrize("profile_id", [0, -4])
def test_non_positive_profile_id(service, groom, profile_id):
    with pytest.raises(InvalidInputError):
        service.record_match_action(groom.user_id, profile_id, "liked")


def test_unknown_target(service, groom):
    with pytest.raises(ProfileNotFoundError):
        service.record_match_action(groom.user_id, 9999, "liked")


def test_cannot_act_on_own_profile(service, groom):
    with pytest.raises(InvalidInputError):
        service.record_match_action(groom.user_id, groom.id, "liked")


def test_failed_write_rolls_back_whole_action(service, groom, bride, monkeypatch):
    service.record_match_action(groom.user_id, bride.id, "liked")

    def broken(*args, **kwargs):
        raise SQLAlchemyError("deadlock detected")

    monkeypatch.setattr(match_crud, "create_mutual_match", broken)

    with pytest.raises(MatchActionFailedError):
        service.record_match_action(bride.user_id, groom.id, "liked")

    assert match_crud.get_match_action(service.db, bride.user_id, groom.user_id) is None
    assert service.db.query(MutualMatch).count() == 0
    assert len(service.locks) == 0


# history

def test_history_is_newest_first_and_filterable(service, make_profile, groom):
    first = make_profile(is_bride=True)
    second = make_profile(is_bride=True)
    third = make_profile(is_bride=True)
    service.record_match_action(groom.user_id, first.id, "liked")
    service.record_match_action(groom.user_id, second.id, "passed")
    service.record_match_action(groom.user_id, third.id, "disliked")

    items, pagination = service.get_match_history(groom.user_id)
    assert [i.profile_id for i in items] == [third.id, second.id, first.id]
    assert [i.action for i in items] == ["disliked", "passed", "liked"]
    assert pagination.total == 3

    liked, pagination = service.get_match_history(groom.user_id, "liked")
    assert [i.profile_id for i in liked] == [first.id]
    assert pagination.total == 1

    everything, _ = service.get_match_history(groom.user_id, "all", limit=2)
    assert len(everything) == 2


def test_history_rejects_unknown_status(service, groom):
    with pytest.raises(InvalidInputError):
        service.get_match_history(groom.user_id, "blocked")


def test_history_moves_updated_action_to_top(service, make_profile, groom):
    first = make_profile(is_bride=True)
    second = make_profile(is_bride=True)
    service.record_match_action(groom.user_id, first.id, "passed")
    service.record_match_action(groom.user_id, second.id, "passed")
    service.update_match_action(groom.user_id, first.id, "liked")

    items, _ = service.get_match_history(groom.user_id)
    assert [(i.profile_id, i.action) for i in items] == [(first.id, "liked"), (second.id, "passed")]


# cross-process pair lock

def test_pair_lock_key_is_symmetric_and_fits_bigint():
    a, b = uuid.uuid4(), uuid.uuid4()
    key = match_crud.pair_lock_key(a, b)

    assert key == match_crud.pair_lock_key(b, a)
    assert -(2 ** 63) <= key < 2 ** 63
    assert key != match_crud.pair_lock_key(a, uuid.uuid4())


class RecordingPostgresSession:
    def __init__(self):
        self.statements = []

    def get_bind(self):
        return SimpleNamespace(dialect=SimpleNamespace(name="postgresql"))

    def execute(self, statement, params):
        self.statements.append((str(statement), params))


def test_lock_pair_takes_advisory_lock_on_postgres():
    a, b = uuid.uuid4(), uuid.uuid4()
    session = RecordingPostgresSession()

    match_crud.lock_pair(session, b, a)

    assert session.statements == [
        ("SELECT pg_advisory_xact_lock(:key)", {"key": match_crud.pair_lock_key(a, b)})
    ]


def test_action_write_takes_pair_lock_inside_transaction(service, groom, bride, monkeypatch):
    locked = []
    monkeypatch.setattr(match_crud, "lock_pair", lambda db, a, b: locked.append({a, b}))

    service.record_match_action(groom.user_id, bride.id, "liked")

    assert locked == [{groom.user_id, bride.user_id}]

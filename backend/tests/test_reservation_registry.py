from app.services.reservation_registry import FacultyReservationRegistry


def test_reserve_marks_only_that_slot_unavailable(registry):
    assert registry.is_available("F1", "Monday", 1)
    assert registry.reserve("F1", "Monday", 1, "CSE-1-A-1") is True

    assert registry.is_available("F1", "Monday", 1) is False
    assert registry.is_available("F1", "Monday", 2)
    assert registry.is_available("F1", "Tuesday", 1)
    assert registry.is_available("F2", "Monday", 1)


def test_reserve_rejects_taken_slot_for_any_class(registry):
    assert registry.reserve("F1", "Monday", 1, "CSE-1-A-1")

    assert registry.reserve("F1", "Monday", 1, "CSE-1-B-1") is False
    assert registry.reserve("F1", "Monday", 1, "CSE-1-A-1") is False
    assert [record.class_info for record in registry.schedule_for("F1")] == ["CSE-1-A-1"]


def test_lost_race_is_reported_not_raised(registry, monkeypatch):
    assert registry.reserve("F1", "Friday", 5, "CSE-1-A-1")

    # Both callers passed the availability check; the unique constraint decides.
    monkeypatch.setattr(registry, "is_available", lambda *args: True)
    assert registry.reserve("F1", "Friday", 5, "CSE-1-B-1") is False
    monkeypatch.undo()

    assert [record.class_info for record in registry.schedule_for("F1")] == ["CSE-1-A-1"]
    assert registry.reserve("F1", "Friday", 6, "CSE-1-B-1")


def test_schedule_for_keeps_insertion_order(registry):
    registry.reserve("F1", "Wednesday", 4, "ECE-2-A-3")
    registry.reserve("F1", "Monday", 2, "ECE-2-B-3")

    schedule = registry.schedule_for("F1")
    assert [(record.day, record.period, record.class_info) for record in schedule] == [
        ("Wednesday", 4, "ECE-2-A-3"),
        ("Monday", 2, "ECE-2-B-3"),
    ]
    assert all(record.faculty_id == "F1" for record in schedule)
    assert registry.schedule_for("F9") == []


def test_release_class_is_idempotent(registry):
    registry.reserve("F1", "Monday", 1, "CSE-1-A-1")
    registry.reserve("F2", "Monday", 1, "CSE-1-A-1")
    registry.reserve("F1", "Tuesday", 3, "CSE-1-B-1")

    assert registry.release_class("CSE-1-A-1") == 2
    after_once = registry.schedule_for("F1") + registry.schedule_for("F2")

    assert registry.release_class("CSE-1-A-1") == 0
    assert registry.schedule_for("F1") + registry.schedule_for("F2") == after_once
    assert [(record.day, record.period, record.class_info) for record in after_once] == [
        ("Tuesday", 3, "CSE-1-B-1")
    ]


def test_reserve_many_commits_the_whole_block(registry):
    assert registry.reserve_many("F1", "Thursday", (5, 6, 7), "CSE-1-A-1")
    assert [record.period for record in registry.schedule_for("F1")] == [5, 6, 7]


def test_reserve_many_rolls_back_a_partial_block(registry):
    registry.reserve("F1", "Monday", 2, "ECE-1-A-1")

    assert registry.reserve_many("F1", "Monday", (1, 2, 3), "CSE-1-A-1") is False
    assert registry.is_available("F1", "Monday", 1)
    assert registry.is_available("F1", "Monday", 3)
    assert [record.class_info for record in registry.schedule_for("F1")] == ["ECE-1-A-1"]


def test_release_slots_only_touches_the_owning_class(registry):
    registry.reserve("F1", "Monday", 1, "CSE-1-A-1")
    registry.reserve("F1", "Monday", 2, "ECE-1-A-1")

    assert registry.release_slots("F1", "Monday", [1, 2], "CSE-1-A-1") == 1
    assert registry.release_slots("F1", "Monday", [], "CSE-1-A-1") == 0
    assert [record.period for record in registry.schedule_for("F1")] == [2]


def test_foreign_reservation_count_ignores_own_class(registry):
    registry.reserve("F1", "Monday", 1, "CSE-1-A-1")
    registry.reserve("F1", "Monday", 2, "CSE-1-B-1")
    registry.reserve("F1", "Monday", 3, "CSE-1-C-1")

    assert registry.foreign_reservation_count("F1", "CSE-1-A-1") == 2
    assert registry.foreign_reservation_count("F2", "CSE-1-A-1") == 0


def test_clear_all_empties_the_registry(registry):
    registry.reserve("F1", "Monday", 1, "CSE-1-A-1")
    registry.reserve("F2", "Saturday", 8, "CSE-1-B-1")

    assert registry.clear_all() == 2
    assert registry.schedule_for("F1") == []
    assert registry.is_available("F2", "Saturday", 8)


def test_reads_see_reservations_committed_by_another_session(registry, session_factory):
    other_session = session_factory()
    try:
        other = FacultyReservationRegistry(other_session)
        assert other.reserve("F1", "Saturday", 4, "MECH-3-A-5")
    finally:
        other_session.close()

    assert registry.is_available("F1", "Saturday", 4) is False
    assert registry.reserve("F1", "Saturday", 4, "CSE-1-A-1") is False

from __future__ import annotations

from judging_core import (
    CriterionCatalog,
    Participant,
    ScoreSheetStore,
    format_event_date,
    rank_event,
    resolve_totals,
    select_winners,
)


def _field(totals, event="Debate"):
    participants = [
        Participant(id=f"p{i + 1}", name=f"Student {i + 1}", event_name=event, attended=True)
        for i in range(len(totals))
    ]
    return participants, {p.id: t for p, t in zip(participants, totals)}


def test_rank_event_ties_skip_following_ranks():
    participants, totals = _field([90, 90, 85, 85, 85, 70])
    out = rank_event(participants, totals, "Debate")
    assert [row.rank for row in out] == [1, 1, 3, 3, 3]
    assert [row.participant_id for row in out] == ["p1", "p2", "p3", "p4", "p5"]
    assert "p6" not in {row.participant_id for row in out}


def test_rank_event_no_ties():
    participants, totals = _field([100, 90, 80, 70])
    out = rank_event(participants, totals, "Debate")
    assert [row.rank for row in out] == [1, 2, 3]
    assert [row.total for row in out] == [100.0, 90.0, 80.0]


def test_rank_event_four_way_tie_for_first_is_not_truncated():
    participants, totals = _field([88, 88, 88, 88])
    out = rank_event(participants, totals, "Debate")
    assert [row.rank for row in out] == [1, 1, 1, 1]


def test_rank_event_tie_on_third_place_emits_whole_group():
    participants, totals = _field([95, 90, 80, 80, 80, 60])
    out = rank_event(participants, totals, "Debate")
    assert [row.rank for row in out] == [1, 2, 3, 3, 3]


def test_rank_event_two_way_tie_for_second_skips_third():
    participants, totals = _field([95, 90, 90, 80])
    out = rank_event(participants, totals, "Debate")
    assert [row.rank for row in out] == [1, 2, 2]


def test_rank_event_empty_input():
    assert rank_event([], {}, "Debate") == []


def test_rank_event_only_ranks_attended_participants_of_event():
    participants = [
        Participant(id="a", name="Ana", event_name="Debate", attended=True),
        Participant(id="b", name="Ben", event_name="Debate", attended=False),
        Participant(id="c", name="Cy", event_name="Quiz", attended=True),
    ]
    totals = {"a": 10, "b": 99, "c": 99}
    out = rank_event(participants, totals, "Debate")
    assert [(row.participant_id, row.rank) for row in out] == [("a", 1)]
    assert rank_event(participants, totals, "Poster") == []


def test_rank_event_missing_total_counts_as_zero():
    participants = [
        Participant(id="a", name="Ana", event_name="Debate", attended=True),
        Participant(id="b", name="Ben", event_name="Debate", attended=True),
    ]
    out = rank_event(participants, {"b": 4}, "Debate")
    assert [(row.participant_id, row.rank, row.total) for row in out] == [
        ("b", 1, 4.0),
        ("a", 2, 0.0),
    ]


def test_rank_event_orders_ties_by_participant_id():
    participants = [
        Participant(id="z", name="Zoe", event_name="Debate", attended=True),
        Participant(id="m", name="Max", event_name="Debate", attended=True),
        Participant(id="a", name="Ana", event_name="Debate", attended=True),
    ]
    out = rank_event(participants, {"z": 5, "m": 5, "a": 5}, "Debate")
    assert [row.participant_id for row in out] == ["a", "m", "z"]


def test_rank_event_is_idempotent():
    participants, totals = _field([70, 90, 85, 90, 85, 85])
    first = rank_event(participants, totals, "Debate")
    second = rank_event(participants, totals, "Debate")
    assert first == second


def test_rank_event_caps_podium_places():
    participants, totals = _field([100, 90, 80, 70, 60])
    assert [row.rank for row in rank_event(participants, totals, "Debate", podium_places=10)] == [
        1,
        2,
        3,
    ]
    assert [row.rank for row in rank_event(participants, totals, "Debate", podium_places=1)] == [1]


def test_resolve_totals_prefers_sheet_then_persisted_marks():
    store = ScoreSheetStore(catalog=CriterionCatalog.from_labels("Debate", ["Logic"]))
    store.set_score("a", 0, "3")
    participants = [
        Participant(id="a", name="Ana", event_name="Debate", attended=True, persisted_marks=50),
        Participant(id="b", name="Ben", event_name="Debate", attended=True, persisted_marks=7),
        Participant(id="c", name="Cy", event_name="Debate", attended=True),
    ]
    assert resolve_totals(participants, store) == {"a": 3.0, "b": 7.0, "c": 0.0}
    assert resolve_totals(participants, None) == {"a": 50.0, "b": 7.0, "c": 0.0}


def test_select_winners_uses_team_name_and_event_date():
    store = ScoreSheetStore(catalog=CriterionCatalog.from_labels("Hackathon", ["Idea", "Demo"]))
    participants = [
        Participant(
            id="t1",
            name="Ana",
            event_name="Hackathon",
            attended=True,
            team_name="Byte Me",
            date="2025-03-14T00:00:00.000Z",
        ),
        Participant(id="s2", name="Ben", event_name="Hackathon", attended=True, date="2025-03-14"),
    ]
    store.set_score("t1", 0, "8")
    store.set_score("t1", 1, "9")
    store.set_score("s2", 0, "10")
    winners = select_winners(participants, store, "Hackathon")
    assert [(w.name, w.rank, w.date) for w in winners] == [
        ("Byte Me", 1, "2025-03-14"),
        ("Ben", 2, "2025-03-14"),
    ]
    assert winners[0].to_record() == {
        "name": "Byte Me",
        "eventName": "Hackathon",
        "rank": 1,
        "date": "2025-03-14",
    }


def test_format_event_date():
    assert format_event_date("2025-01-02T10:00:00Z") == "2025-01-02"
    assert format_event_date("2025-01-02") == "2025-01-02"
    assert format_event_date("") is None
    assert format_event_date("not a date") is None
    assert format_event_date(None) is None

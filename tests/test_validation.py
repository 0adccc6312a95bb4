import pytest

from judging_core import MarksPayload, PayloadValidator, WinnerBatch


def test_marks_payload_accepts_matching_breakdown():
    payload = PayloadValidator.validate_marks("p1", 7.5, [2.5, 5.0])
    assert payload.total == 7.5
    assert payload.breakdown == [2.5, 5.0]


def test_marks_payload_rejects_negative_and_mismatched_total():
    with pytest.raises(ValueError):
        PayloadValidator.validate_marks("p1", -1.0, [])
    with pytest.raises(ValueError):
        PayloadValidator.validate_marks("p1", 10.0, [2.0, 3.0])
    with pytest.raises(ValueError):
        PayloadValidator.validate_marks("", 1.0, [1.0])


def test_marks_payload_without_breakdown():
    assert MarksPayload(participant_id="p1", total=4).breakdown == []


def test_winner_batch_rejects_rank_outside_podium():
    with pytest.raises(ValueError):
        PayloadValidator.validate_winner_batch([{"name": "A", "eventName": "Quiz", "rank": 4}])
    with pytest.raises(ValueError):
        PayloadValidator.validate_winner_batch([{"name": "A", "eventName": "Quiz", "rank": 0}])


def test_winner_batch_rejects_mixed_events_and_unordered_ranks():
    with pytest.raises(ValueError):
        PayloadValidator.validate_winner_batch(
            [
                {"name": "A", "eventName": "Quiz", "rank": 1},
                {"name": "B", "eventName": "Debate", "rank": 2},
            ]
        )
    with pytest.raises(ValueError):
        PayloadValidator.validate_winner_batch(
            [
                {"name": "A", "eventName": "Quiz", "rank": 2},
                {"name": "B", "eventName": "Quiz", "rank": 1},
            ]
        )


def test_winner_batch_rejects_blank_name_and_bad_date():
    with pytest.raises(ValueError):
        PayloadValidator.validate_winner_batch([{"name": "  ", "eventName": "Quiz", "rank": 1}])
    with pytest.raises(ValueError):
        PayloadValidator.validate_winner_batch(
            [{"name": "A", "eventName": "Quiz", "rank": 1, "date": "14/03/2025"}]
        )


def test_winner_batch_to_records_drops_missing_date():
    batch = WinnerBatch(winners=[{"name": " A ", "eventName": "Quiz", "rank": 1}])
    assert batch.to_records() == [{"name": "A", "eventName": "Quiz", "rank": 1}]

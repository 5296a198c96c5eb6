from __future__ import annotations

from furigen.familiarity import WordFamiliarityTracker


def test_position_advances_once_per_observation() -> None:
    tracker = WordFamiliarityTracker()
    positions = [tracker.observe(word).position for word in ["本", "猫", "本", "犬"]]
    assert positions == [1, 2, 3, 4]
    assert tracker.position == 4
    assert len(tracker) == 3


def test_first_occurrence_has_no_distance() -> None:
    tracker = WordFamiliarityTracker()
    observation = tracker.observe("本")
    assert observation.first_occurrence
    assert observation.distance is None
    assert observation.times_seen == 1
    assert observation.max_distance == 0


def test_distance_and_max_distance_follow_the_gaps() -> None:
    tracker = WordFamiliarityTracker()
    occurrences = {1, 5, 40, 42}
    seen = []
    for position in range(1, 43):
        word = "本" if position in occurrences else "猫"
        observation = tracker.observe(word)
        if word == "本":
            seen.append((observation.distance, observation.max_distance, observation.times_seen))
    assert seen == [
        (None, 0, 1),
        (4, 4, 2),
        (35, 35, 3),
        (2, 35, 4),
    ]
    record = tracker.get("本")
    assert record is not None
    assert record.last_seen_position == 42
    assert record.max_distance == 35


def test_get_returns_a_copy() -> None:
    tracker = WordFamiliarityTracker()
    tracker.observe("本")
    record = tracker.get("本")
    assert record is not None
    record.times_seen = 100
    assert tracker.get("本").times_seen == 1  # type: ignore[union-attr]
    assert tracker.get("犬") is None


def test_records_keep_first_seen_order() -> None:
    tracker = WordFamiliarityTracker()
    for word in ["犬", "本", "犬", "猫"]:
        tracker.observe(word)
    assert [record.key for record in tracker.records()] == ["犬", "本", "猫"]
    assert "犬" in tracker
    assert "鳥" not in tracker

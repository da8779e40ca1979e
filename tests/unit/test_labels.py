"""
Unit tests for label and score pairing.
"""

import numpy as np
import pytest

from incepta.core.ml.labels import get_label, pair_labels, select_confident
from incepta.models.image import LabelConfidence


class TestGetLabel:
    """Tests for get_label."""

    def test_returns_highest_score(self) -> None:
        label, score = get_label(["cat", "dog", "bird"], np.array([0.1, 0.7, 0.2]))
        assert label == "dog"
        assert score == pytest.approx(0.7)

    def test_first_index_wins_ties(self) -> None:
        label, _ = get_label(["a", "b", "c"], [0.4, 0.4, 0.2])
        assert label == "a"

    def test_empty_scores_raise(self) -> None:
        with pytest.raises(ValueError):
            get_label(["a"], [])


class TestPairLabels:
    """Tests for pair_labels."""

    def test_pairs_by_position(self) -> None:
        pairs = pair_labels(["cat", "dog"], [0.25, 0.75])
        assert pairs == [LabelConfidence("cat", 0.25), LabelConfidence("dog", 0.75)]

    def test_stops_at_shorter_sequence(self) -> None:
        assert len(pair_labels(["a", "b", "c"], [0.5, 0.5])) == 2
        assert len(pair_labels(["a"], [0.1, 0.2, 0.7])) == 1


class TestSelectConfident:
    """Tests for select_confident."""

    def test_filters_and_sorts(self) -> None:
        pairs = pair_labels(["cat", "dog", "bird"], [0.1, 0.85, 0.05])
        selected = select_confident(pairs, 0.3)

        assert [(p.label, p.probability) for p in selected] == [("dog", pytest.approx(0.85))]

    def test_threshold_is_inclusive(self) -> None:
        pairs = pair_labels(["a", "b"], [0.3, 0.29])
        assert [p.label for p in select_confident(pairs, 0.3)] == ["a"]

    def test_equal_probabilities_keep_order(self) -> None:
        pairs = pair_labels(["x", "y", "z"], [0.4, 0.6, 0.4])
        assert [p.label for p in select_confident(pairs, 0.3)] == ["y", "x", "z"]

    def test_tie_for_highest_keeps_order(self) -> None:
        pairs = pair_labels(["a", "b", "c"], [0.45, 0.45, 0.1])
        assert [p.label for p in select_confident(pairs, 0.3)] == ["a", "b"]

    def test_nothing_above_threshold(self) -> None:
        assert select_confident(pair_labels(["a"], [0.1]), 0.3) == []

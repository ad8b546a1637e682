import dataclasses

import pytest

from true_iso.image_processing import Outcome


def test_ok_is_not_degraded():
    result = Outcome.ok(5)
    assert result.value == 5
    assert not result.is_degraded
    assert result.reason is None


def test_degraded_keeps_value_and_reason():
    result = Outcome.degraded([1, 2], "fallback used")
    assert result.value == [1, 2]
    assert result.is_degraded
    assert result.reason == "fallback used"


def test_outcome_is_frozen():
    result = Outcome.ok(1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.value = 2

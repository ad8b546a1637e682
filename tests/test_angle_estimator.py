import pytest

from true_iso.image_processing import ClassifiedLine, weighted_median


def test_empty_class_uses_default():
    result = weighted_median([], -26.565)
    assert result.is_degraded
    assert result.value.angle_degrees == -26.565
    assert result.value.confidence == 0.0


def test_zero_support_uses_default():
    result = weighted_median([ClassifiedLine(-30.0, 0.0)], -26.565)
    assert result.is_degraded
    assert result.value.angle_degrees == -26.565
    assert result.value.confidence == 0.0


def test_single_line():
    result = weighted_median([ClassifiedLine(-25.0, 50.0)], -26.565)
    assert not result.is_degraded
    assert result.value.angle_degrees == -25.0
    assert result.value.confidence == pytest.approx(0.5)


def test_confidence_saturates():
    result = weighted_median([ClassifiedLine(25.0, 250.0)], 26.565)
    assert result.value.confidence == 1.0


def test_weighted_median_ignores_light_outliers():
    lines = [
        ClassifiedLine(-20.0, 10.0),
        ClassifiedLine(-30.0, 10.0),
        ClassifiedLine(-26.0, 50.0),
    ]
    result = weighted_median(lines, -26.565)
    assert result.value.angle_degrees == -26.0
    assert result.value.confidence == pytest.approx(70.0 / 300.0)


def test_median_picks_first_angle_reaching_half_weight():
    lines = [ClassifiedLine(30.0, 10.0), ClassifiedLine(20.0, 10.0)]
    assert weighted_median(lines, 26.565).value.angle_degrees == 20.0


def test_length_per_line_scales_confidence():
    result = weighted_median([ClassifiedLine(-25.0, 50.0)], -26.565, length_per_line=50.0)
    assert result.value.confidence == 1.0


def test_weighted_mean_used_when_cumulative_sum_loses_precision():
    # Summed in input order the total is 1.0; in angle order the 1.0 is
    # absorbed by -1e17 and the running sum never reaches half of it.
    lines = [
        ClassifiedLine(-20.0, 1e17),
        ClassifiedLine(-40.0, -1e17),
        ClassifiedLine(-30.0, 1.0),
    ]
    result = weighted_median(lines, -26.565)
    assert result.is_degraded
    assert "weighted mean" in result.reason
    expected = sum(line.angle_degrees * line.length for line in lines) / 1.0
    assert result.value.angle_degrees == pytest.approx(expected)


def test_non_finite_support_uses_default():
    result = weighted_median([ClassifiedLine(-30.0, float("nan"))], -26.565)
    assert result.is_degraded
    assert result.value.angle_degrees == -26.565

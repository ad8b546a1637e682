"""Robust per-class angle estimation."""

from typing import NamedTuple, Sequence

from .line_classifier import ClassifiedLine
from .outcome import Outcome


class AngleEstimate(NamedTuple):
    """
    Representative angle of one diagonal class.

    Confidence grows with total edge support and saturates at 1.0; it is
    only meaningful for ranking, not as a probability.
    """

    angle_degrees: float
    confidence: float


def _confidence(total_weight: float, count: int, length_per_line: float) -> float:
    return min(1.0, total_weight / (count * length_per_line))


def weighted_median(
    lines: Sequence[ClassifiedLine],
    default_angle: float,
    length_per_line: float = 100.0
) -> Outcome[AngleEstimate]:
    """
    Compute the length-weighted median angle of a line class.

    Args:
        lines: Lines of a single class
        default_angle: Angle reported when the class has no support,
            normally the exact target angle so no correction is applied
        length_per_line: Support length per line that counts as full confidence

    Returns:
        Outcome holding the estimate; degraded when the default or the
        weighted-mean fallback was used
    """
    if not lines:
        return Outcome.degraded(AngleEstimate(default_angle, 0.0), "no lines in class")

    total_weight = sum(line.length for line in lines)
    if not total_weight > 0:
        return Outcome.degraded(AngleEstimate(default_angle, 0.0), "lines in class have no edge support")

    confidence = _confidence(total_weight, len(lines), length_per_line)
    ordered = sorted(lines, key=lambda line: line.angle_degrees)

    cumulative = 0.0
    half_weight = total_weight / 2.0
    for line in ordered:
        cumulative += line.length
        if cumulative >= half_weight:
            return Outcome.ok(AngleEstimate(line.angle_degrees, confidence))

    # Cumulative sum fell short of half the total through rounding
    weighted_sum = sum(line.angle_degrees * line.length for line in lines)
    return Outcome.degraded(
        AngleEstimate(weighted_sum / total_weight, confidence),
        "weighted median did not reach half weight, used weighted mean"
    )

import numpy as np
import pytest

from true_iso.image_processing import (
    CannyEdgeDetector,
    ClassifiedLine,
    HoughLineDetector,
    RawLine,
    classify_lines,
    estimate_line_length,
    measure_lines,
    polar_to_angle_degrees,
    to_grayscale_masked
)


@pytest.mark.parametrize("theta, expected", [
    (90.0, 0.0),
    (63.0, -27.0),
    (117.0, 27.0),
    (0.0, 90.0),
    (179.0, 89.0),
])
def test_polar_to_angle(theta, expected):
    assert polar_to_angle_degrees(RawLine(0.0, theta)) == pytest.approx(expected)


def test_length_counts_edge_pixels_on_vertical_line():
    edges = np.zeros((50, 50), dtype=np.uint8)
    edges[5:25, 10] = 255
    assert estimate_line_length(edges, RawLine(10.0, 0.0)) == 20


def test_length_of_line_outside_image_is_zero():
    edges = np.full((20, 20), 255, dtype=np.uint8)
    assert estimate_line_length(edges, RawLine(500.0, 45.0)) == 0


def test_measure_lines_pairs_angle_and_length():
    edges = np.zeros((30, 30), dtype=np.uint8)
    edges[:, 4] = 255
    measured = measure_lines(edges, [RawLine(4.0, 0.0)])
    assert measured == [ClassifiedLine(90.0, 30.0)]


def test_classify_lines_uses_inclusive_ranges():
    lines = [
        ClassifiedLine(-60.0, 1),
        ClassifiedLine(-26.0, 1),
        ClassifiedLine(-15.0, 1),
        ClassifiedLine(-10.0, 1),
        ClassifiedLine(0.0, 1),
        ClassifiedLine(15.0, 1),
        ClassifiedLine(27.0, 1),
        ClassifiedLine(61.0, 1),
        ClassifiedLine(90.0, 1),
    ]
    left, right = classify_lines(lines)
    assert [line.angle_degrees for line in left] == [-60.0, -26.0, -15.0]
    assert [line.angle_degrees for line in right] == [15.0, 27.0]


def test_hough_returns_nothing_for_empty_edges():
    assert HoughLineDetector().detect_lines(np.zeros((20, 20), dtype=np.uint8)) == []


def test_hough_rejects_bad_step():
    with pytest.raises(ValueError):
        HoughLineDetector(angle_step=0)


def test_canny_requires_grayscale():
    with pytest.raises(ValueError):
        CannyEdgeDetector().detect_edges(np.zeros((4, 4, 3), dtype=np.uint8))


def test_detects_diamond_diagonals(make_diamond):
    gray = to_grayscale_masked(make_diamond())
    edges = CannyEdgeDetector().detect_edges(gray)
    assert edges.shape == gray.shape
    assert np.any(edges)

    lines = HoughLineDetector().detect_lines(edges, 40, 8)
    left, right = classify_lines(measure_lines(edges, lines))
    assert left and right
    assert all(-30.0 < line.angle_degrees < -23.0 for line in left)
    assert all(23.0 < line.angle_degrees < 30.0 for line in right)

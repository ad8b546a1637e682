import numpy as np

from true_iso.image_processing import (
    apply_affine_transform,
    bicubic_interpolate,
    bilinear_interpolate,
    clean_edges,
    premultiply_alpha,
    unpremultiply_alpha
)


def random_sprite(seed=0, width=12, height=9):
    rng = np.random.default_rng(seed)
    image = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    image[:, :, 3] = rng.integers(1, 256, size=(height, width), dtype=np.uint8)
    return image


def test_premultiply_round_trip():
    image = random_sprite()
    restored = unpremultiply_alpha(premultiply_alpha(image))
    diff = np.abs(restored.astype(int) - image.astype(int))
    assert diff.max() <= 1


def test_premultiply_scales_color():
    image = np.array([[[200, 100, 50, 51]]], dtype=np.uint8)
    premultiplied = premultiply_alpha(image)
    np.testing.assert_allclose(premultiplied[0, 0], [40.0, 20.0, 10.0, 51.0])


def test_near_zero_alpha_becomes_transparent():
    samples = np.array([[10.0, 20.0, 30.0, 0.5]])
    assert unpremultiply_alpha(samples).tolist() == [[0, 0, 0, 0]]


def test_interpolators_are_exact_at_pixel_positions():
    premultiplied = premultiply_alpha(random_sprite(seed=3))
    ys, xs = np.mgrid[0:9, 0:12].astype(np.float64)
    np.testing.assert_allclose(bicubic_interpolate(premultiplied, xs, ys), premultiplied, atol=1e-9)
    np.testing.assert_allclose(bilinear_interpolate(premultiplied, xs, ys), premultiplied, atol=1e-9)


def test_identity_transform_preserves_pixels(make_rect):
    image = make_rect(width=40, height=30, x=5, y=5, w=20, h=10)
    result = apply_affine_transform(image, np.eye(3))
    assert not result.is_degraded
    np.testing.assert_array_equal(result.value, image)


def test_singular_transform_returns_copy(make_rect):
    image = make_rect(width=20, height=20, x=2, y=2, w=5, h=5)
    result = apply_affine_transform(image, np.zeros((3, 3)))
    assert result.is_degraded
    np.testing.assert_array_equal(result.value, image)
    assert result.value is not image


def test_canvas_is_clamped(make_rect):
    image = make_rect(width=10, height=10, x=0, y=0, w=10, h=10)
    result = apply_affine_transform(image, np.diag([5.0, 5.0, 1.0]), max_scale_factor=3)
    assert result.value.shape == (30, 30, 4)


def test_translation_keeps_canvas_size(make_rect):
    image = make_rect(width=20, height=20, x=4, y=4, w=8, h=8)
    matrix = np.eye(3)
    matrix[0, 2] = 3.0
    result = apply_affine_transform(image, matrix)
    np.testing.assert_array_equal(result.value, image)


def test_clean_edges_clears_isolated_fringe(make_blank):
    image = make_blank(5, 5)
    image[2, 2] = (255, 255, 255, 20)
    cleaned = clean_edges(image)
    assert cleaned[2, 2].tolist() == [0, 0, 0, 0]
    assert image[2, 2, 3] == 20


def test_clean_edges_keeps_supported_fringe(make_blank):
    image = make_blank(5, 5)
    image[1:4, 1:4, 3] = 255
    image[2, 2, 3] = 20
    assert clean_edges(image)[2, 2, 3] == 20


def test_clean_edges_keeps_solid_pixels(make_blank):
    image = make_blank(5, 5)
    image[2, 2] = (255, 255, 255, 40)
    assert clean_edges(image)[2, 2, 3] == 40


def test_clean_edges_skips_tiny_images(make_blank):
    image = make_blank(2, 2)
    image[0, 0, 3] = 5
    np.testing.assert_array_equal(clean_edges(image), image)


def test_rank_deficient_transform_returns_copy(make_rect):
    image = make_rect(width=20, height=20, x=2, y=2, w=5, h=5)
    matrix = np.array([[1.0, 1.0, 0.0], [1.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
    result = apply_affine_transform(image, matrix)
    assert result.is_degraded
    assert result.value.shape == (20, 20, 4)


def test_corners_at_infinity_use_clamped_canvas(make_rect):
    image = make_rect(width=20, height=20, x=2, y=2, w=5, h=5)
    # Invertible, but the bottom row sends the x=20 corners to infinity
    matrix = np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.05, 0.0, -1.0]])
    result = apply_affine_transform(image, matrix, max_scale_factor=3)
    assert not result.is_degraded
    assert result.value.shape == (60, 60, 4)

import numpy as np
import pytest

from true_iso.image_processing import crop_to_content, resize_to_fit


def test_crop_removes_padding(make_rect):
    image = make_rect(width=20, height=20, x=3, y=5, w=10, h=5)
    result = crop_to_content(image)
    assert not result.is_degraded
    assert result.value.shape == (5, 10, 4)
    assert np.all(result.value[:, :, 3] == 255)


def test_crop_of_transparent_image_is_unchanged(make_blank):
    image = make_blank(8, 6)
    result = crop_to_content(image)
    assert result.is_degraded
    np.testing.assert_array_equal(result.value, image)


def test_resize_fits_longest_side(make_rect):
    image = make_rect(width=10, height=5, x=0, y=0, w=10, h=5, color=(200, 100, 50))
    resized = resize_to_fit(image, 20)
    assert resized.shape == (10, 20, 4)
    assert np.all(resized[:, :, :3] == (200, 100, 50))
    assert np.all(resized[:, :, 3] == 255)


def test_resize_rounds_half_up(make_rect):
    image = make_rect(width=4, height=3, x=0, y=0, w=4, h=3)
    assert resize_to_fit(image, 6).shape == (5, 6, 4)


def test_resize_to_same_size_is_identity():
    rng = np.random.default_rng(7)
    image = rng.integers(0, 256, size=(12, 20, 4), dtype=np.uint8)
    image[:, :, 3] = 255
    np.testing.assert_array_equal(resize_to_fit(image, 20), image)


def test_bilinear_resize(make_rect):
    image = make_rect(width=8, height=8, x=0, y=0, w=8, h=8, color=(10, 20, 30))
    resized = resize_to_fit(image, 3, interpolation='bilinear')
    assert resized.shape == (3, 3, 4)
    assert np.all(resized == (10, 20, 30, 255))


def test_resize_rejects_bad_arguments(make_rect):
    image = make_rect(width=8, height=8)
    with pytest.raises(ValueError):
        resize_to_fit(image, 0)
    with pytest.raises(ValueError):
        resize_to_fit(image, 4, interpolation='lanczos')


def test_resize_of_empty_buffer(make_blank):
    image = make_blank(0, 0)
    assert resize_to_fit(image, 16).shape == (0, 0, 4)

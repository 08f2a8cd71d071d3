"""Tests for flips, rotation and resizing."""

import numpy as np
import pytest

from parallel_editor import api
from parallel_editor.core import FlipAxis, NullImageError, PixelBuffer, ResizeAlgorithm
from parallel_editor.processing import geometry


def test_flip_horizontal(primaries):
    result = geometry.flip_horizontal(primaries)
    assert result.get(0, 0) == (0, 255, 0)
    assert result.get(1, 0) == (255, 0, 0)
    assert result.get(0, 1) == (255, 255, 255)
    assert primaries.get(0, 0) == (255, 0, 0)


def test_flip_vertical(primaries):
    result = geometry.flip_vertical(primaries)
    assert result.get(0, 0) == (0, 0, 255)
    assert result.get(1, 1) == (0, 255, 0)


@pytest.mark.parametrize("axis", [FlipAxis.HORIZONTAL, "horizontal", "Vertical", FlipAxis.VERTICAL])
def test_flip_twice_is_identity(axis, random_buffer):
    assert api.flip(api.flip(random_buffer, axis), axis) == random_buffer


def test_flip_rejects_unknown_axis(primaries):
    with pytest.raises(ValueError):
        geometry.flip(primaries, "diagonal")


def test_rotate_is_clockwise():
    buffer = PixelBuffer.create(3, 2)
    buffer.set(0, 0, (1, 1, 1))
    buffer.set(2, 0, (2, 2, 2))
    buffer.set(0, 1, (3, 3, 3))

    result = api.rotate90(buffer)
    assert (result.width, result.height) == (2, 3)
    # Top-left moves to top-right; bottom-left moves to top-left
    assert result.get(1, 0) == (1, 1, 1)
    assert result.get(1, 2) == (2, 2, 2)
    assert result.get(0, 0) == (3, 3, 3)


def test_four_rotations_are_identity(random_buffer):
    result = random_buffer
    for _ in range(4):
        result = geometry.rotate_90(result)
    assert result == random_buffer


def test_geometry_requires_image():
    with pytest.raises(NullImageError):
        geometry.flip_horizontal(None)
    with pytest.raises(NullImageError):
        geometry.rotate_90(None)
    with pytest.raises(NullImageError):
        geometry.resize(None)


def test_resize_defaults_to_200_square(gradient_buffer):
    result = geometry.resize(gradient_buffer)
    assert (result.width, result.height) == (200, 200)


@pytest.mark.parametrize("algorithm", list(ResizeAlgorithm))
def test_resize_uniform_image_stays_uniform(algorithm):
    pixels = np.full((10, 20, 3), (40, 120, 200), dtype=np.uint8)
    buffer = PixelBuffer.from_array(pixels)
    result = api.resize(buffer, 33, 7, algorithm)
    assert (result.width, result.height) == (33, 7)
    diff = np.abs(result.pixels.astype(int) - np.array([40, 120, 200]))
    assert diff.max() <= 1


def test_nearest_upscale_keeps_corner_colors(primaries):
    result = geometry.resize(primaries, 4, 4, ResizeAlgorithm.NEAREST)
    assert result.get(0, 0) == (255, 0, 0)
    assert result.get(3, 0) == (0, 255, 0)
    assert result.get(0, 3) == (0, 0, 255)
    assert result.get(3, 3) == (255, 255, 255)


def test_resize_to_same_size_is_a_copy(primaries):
    result = geometry.resize(primaries, 2, 2)
    assert result == primaries
    assert result is not primaries


@pytest.mark.parametrize("size", [(0, 10), (10, 0), (-5, 5)])
def test_resize_rejects_non_positive_size(size, primaries):
    with pytest.raises(ValueError):
        geometry.resize(primaries, *size)

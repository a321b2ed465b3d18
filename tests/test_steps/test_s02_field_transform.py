"""Tests for S02: Field transform step (normalisation and outline extraction)."""

import numpy as np
import pytest

from pix2stl.core.errors import DegenerateInputError
from pix2stl.steps.s02_field_transform.config import FieldTransformConfig
from pix2stl.steps.s02_field_transform.contracts import FieldTransformInput
from pix2stl.steps.s02_field_transform.step import FieldTransformStep
from pix2stl.steps.s02_field_transform._normalize import normalize_field
from pix2stl.steps.s02_field_transform._outline import binarize, outline_field


def _transform(values: np.ndarray, strategy: str, **cfg):
    step = FieldTransformStep(config=FieldTransformConfig(**cfg))
    return step.execute(FieldTransformInput(values=values, strategy=strategy))


def _square_occupancy(size: int = 7, lo: int = 2, hi: int = 5) -> np.ndarray:
    occ = np.zeros((size, size), dtype=bool)
    occ[lo:hi, lo:hi] = True
    return occ


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------

class TestNormalize:
    def test_min_zero_max_one(self):
        rng = np.random.default_rng(1)
        heights = normalize_field(rng.uniform(40, 200, (9, 13)))
        assert heights.min() == 0.0
        assert heights.max() == 1.0

    def test_linear(self):
        np.testing.assert_allclose(normalize_field(np.array([[10.0, 20.0, 30.0]])), [[0.0, 0.5, 1.0]])

    def test_flat_field_is_zero(self):
        np.testing.assert_array_equal(normalize_field(np.full((4, 4), 255.0)), np.zeros((4, 4)))

    def test_flat_field_required_variation(self):
        with pytest.raises(DegenerateInputError):
            normalize_field(np.full((4, 4), 255.0), require_variation=True)

    def test_invert(self):
        np.testing.assert_allclose(
            normalize_field(np.array([[0.0, 255.0]]), invert=True), [[1.0, 0.0]]
        )


# ---------------------------------------------------------------------------
# Outline extraction
# ---------------------------------------------------------------------------

class TestOutline:
    def test_binarize_dark_is_foreground(self):
        occ = binarize(np.array([[0.0, 127.9, 128.0, 255.0]]))
        assert occ.tolist() == [[True, True, False, False]]

    def test_filled_square_only_perimeter(self):
        occ = _square_occupancy()
        outline = outline_field(occ)
        expected = occ.copy()
        expected[3, 3] = False  # the single interior cell
        np.testing.assert_array_equal(outline, expected)

    def test_isolated_centre_pixel_is_not_outline(self):
        """3x3 grid with only the centre set: no outline at all."""
        occ = np.zeros((3, 3), dtype=bool)
        occ[1, 1] = True
        assert not outline_field(occ).any()

    def test_isolated_pixel_kept_when_not_dropping(self):
        occ = np.zeros((3, 3), dtype=bool)
        occ[1, 1] = True
        assert outline_field(occ, drop_isolated=False)[1, 1]

    def test_border_never_outline(self):
        occ = np.zeros((6, 6), dtype=bool)
        occ[:, :3] = True
        outline = outline_field(occ)
        assert not outline[0].any() and not outline[-1].any()
        assert not outline[:, 0].any() and not outline[:, -1].any()
        # interior column next to background
        assert outline[1:-1, 2].all()

    def test_all_foreground_has_no_outline(self):
        assert not outline_field(np.ones((5, 5), dtype=bool)).any()

    def test_tiny_grid(self):
        assert outline_field(np.ones((2, 2), dtype=bool)).shape == (2, 2)


# ---------------------------------------------------------------------------
# Step
# ---------------------------------------------------------------------------

class TestFieldTransformStep:
    def test_heightmap_output(self):
        out = _transform(np.array([[0.0, 255.0], [128.0, 64.0]]), "heightmap")
        assert out.strategy == "heightmap"
        assert out.field.min() == 0.0 and out.field.max() == 1.0
        assert out.is_flat is False
        assert out.occupancy is None

    def test_heightmap_flat_white(self):
        out = _transform(np.full((4, 4), 255.0), "heightmap")
        np.testing.assert_array_equal(out.field, 0.0)
        assert out.is_flat is True

    def test_heightmap_flat_required(self):
        with pytest.raises(DegenerateInputError):
            _transform(np.full((4, 4), 255.0), "heightmap", require_variation=True)

    def test_outline_output(self):
        values = np.where(_square_occupancy(), 0.0, 255.0)
        out = _transform(values, "outline")
        assert out.field.dtype == bool
        assert out.feature_cells == 8
        assert int(out.occupancy.sum()) == 9

    def test_outline_empty_required(self):
        with pytest.raises(DegenerateInputError):
            _transform(np.full((5, 5), 255.0), "outline", require_variation=True)

    def test_outline_threshold(self):
        values = np.where(_square_occupancy(), 150.0, 255.0)
        assert _transform(values, "outline").feature_cells == 0
        assert _transform(values, "outline", threshold=200.0).feature_cells == 8

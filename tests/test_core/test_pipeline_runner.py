"""Tests for core pipeline runner and contracts."""

from pathlib import Path

import numpy as np
import pytest
import yaml

from pix2stl.core.contracts import (
    GenerationConfig,
    GenerationResult,
    PipelineFailure,
    StepEntry,
    StepMeta,
)
from pix2stl.core.errors import DecodeError, DegenerateInputError, InternalError, PipelineError
from pix2stl.core.pipeline_runner import (
    PIPELINE_STEPS,
    generate_stl,
    import_step_class,
    load_generation_config,
    run_pipeline,
)


class TestContracts:
    def test_step_meta(self):
        meta = StepMeta(step_name="test", elapsed_seconds=1.5, params={"a": 1})
        assert meta.step_name == "test"
        assert meta.elapsed_seconds == 1.5

    def test_step_entry(self):
        entry = StepEntry(name="s1", module="pix2stl.steps.s01_raster_sample", config_key="sampling")
        assert entry.config_key == "sampling"

    def test_generation_config_defaults(self):
        cfg = GenerationConfig()
        assert cfg.strategy == "heightmap"
        assert cfg.sampling.max_dimension == 512
        assert cfg.field.threshold == 128.0
        assert cfg.mesh.scale == 60.0
        assert cfg.stl.float_precision is None

    def test_generation_config_is_frozen(self):
        cfg = GenerationConfig()
        with pytest.raises(Exception):
            cfg.strategy = "outline"
        with pytest.raises(Exception):
            cfg.mesh.scale = 1.0

    def test_unknown_strategy_rejected(self):
        with pytest.raises(Exception):
            GenerationConfig(strategy="voxel")

    def test_error_kinds(self):
        assert DecodeError.kind == "DecodeError"
        assert DegenerateInputError.kind == "DegenerateInputError"
        assert InternalError.kind == "InternalError"
        assert issubclass(DecodeError, PipelineError)


class TestConfigLoading:
    def test_load_generation_config(self, tmp_path: Path):
        config = {
            "strategy": "outline",
            "sampling": {"max_dimension": 128},
            "mesh": {"scale": 80.0, "outline": {"num_layers": 4}},
        }
        config_file = tmp_path / "generation.yaml"
        with open(config_file, "w") as f:
            yaml.dump(config, f)

        cfg = load_generation_config(config_file)
        assert cfg.strategy == "outline"
        assert cfg.sampling.max_dimension == 128
        assert cfg.mesh.scale == 80.0
        assert cfg.mesh.outline.num_layers == 4
        assert cfg.mesh.outline.top_width == 4.0

    def test_empty_yaml_gives_defaults(self, tmp_path: Path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        assert load_generation_config(config_file) == GenerationConfig()

    def test_shipped_default_config(self):
        path = Path(__file__).resolve().parents[2] / "configs" / "default.yaml"
        assert load_generation_config(path) == GenerationConfig()


class TestStepImport:
    def test_import_step_class(self):
        cls = import_step_class("pix2stl.steps.s01_raster_sample")
        assert cls.__name__ == "RasterSampleStep"
        assert hasattr(cls, "input_type")
        assert hasattr(cls, "output_type")

    def test_import_all_steps(self):
        names = []
        for entry in PIPELINE_STEPS:
            cls = import_step_class(entry.module)
            assert cls.name, f"{entry.module} has empty name"
            assert "properties" in cls.get_config_schema()
            names.append(cls.name)
        assert names == [entry.name for entry in PIPELINE_STEPS]

    def test_config_keys_exist(self):
        cfg = GenerationConfig()
        for entry in PIPELINE_STEPS:
            step_cls = import_step_class(entry.module)
            assert isinstance(getattr(cfg, entry.config_key), step_cls.config_type)


class TestRunPipeline:
    def test_heightmap_success(self, gradient_png):
        result = run_pipeline(gradient_png)
        assert isinstance(result, GenerationResult)
        assert (result.grid_width, result.grid_height) == (16, 8)
        assert result.num_triangles == 2 * 15 * 7 + 2
        assert result.stl_text.startswith("solid heightmap\n")
        assert [m.step_name for m in result.steps] == [e.name for e in PIPELINE_STEPS]

    def test_outline_success(self, square_png):
        cfg = GenerationConfig(strategy="outline")
        result = run_pipeline(square_png, cfg)
        assert isinstance(result, GenerationResult)
        assert result.stl_text.startswith("solid cookieCutter\n")
        assert result.num_triangles > 12

    def test_white_image_gives_base_only(self, white_png_4x4):
        """4x4 all-white: flat field, so only the two floor triangles."""
        text = generate_stl(white_png_4x4)
        assert isinstance(text, str)
        assert text.count("facet normal") == 2
        assert text.count("facet normal 0.0 0.0 -1.0") == 2

    def test_white_image_outline_gives_base_plate(self, white_png_4x4):
        text = generate_stl(white_png_4x4, GenerationConfig(strategy="outline"))
        assert text.count("facet normal") == 12

    def test_deterministic(self, square_jpeg):
        for strategy in ("heightmap", "outline"):
            cfg = GenerationConfig(strategy=strategy)
            assert generate_stl(square_jpeg, cfg) == generate_stl(square_jpeg, cfg)

    def test_facet_count_matches_triangles(self, square_png):
        result = run_pipeline(square_png, GenerationConfig(strategy="outline"))
        assert result.stl_text.count("endfacet") == result.num_triangles

    def test_decode_failure(self):
        result = run_pipeline(b"definitely not an image")
        assert isinstance(result, PipelineFailure)
        assert result.kind == "DecodeError"
        assert result.step == "raster_sample"

    def test_empty_bytes_failure(self):
        result = generate_stl(b"")
        assert isinstance(result, PipelineFailure)
        assert result.kind == "DecodeError"

    def test_degenerate_failure(self, white_png_4x4):
        cfg = GenerationConfig(field={"require_variation": True})
        result = run_pipeline(white_png_4x4, cfg)
        assert isinstance(result, PipelineFailure)
        assert result.kind == "DegenerateInputError"
        assert result.step == "field_transform"

    def test_unexpected_error_is_internal(self, gradient_png, monkeypatch):
        from pix2stl.steps.s03_mesh_build import _heightmap

        def boom(self, heights, config):
            raise ZeroDivisionError("boom")

        monkeypatch.setattr(_heightmap.HeightMapBuilder, "surface_triangles", boom)
        result = run_pipeline(gradient_png)
        assert isinstance(result, PipelineFailure)
        assert result.kind == "InternalError"
        assert result.step == "mesh_build"
        assert "ZeroDivisionError" in result.message

    def test_config_not_shared_between_runs(self, gradient_png):
        small = GenerationConfig(mesh={"scale": 10.0})
        large = GenerationConfig(mesh={"scale": 100.0})
        a = run_pipeline(gradient_png, small)
        b = run_pipeline(gradient_png, large)
        assert a.stl_text != b.stl_text
        assert run_pipeline(gradient_png, small).stl_text == a.stl_text

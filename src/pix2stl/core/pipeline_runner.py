"""Pipeline orchestrator: drives the four steps over one image, in order.

Each run either returns the complete STL text or a PipelineFailure; a
partially built mesh is never handed back.
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel

from .contracts import GenerationConfig, GenerationResult, PipelineFailure, StepEntry, StepMeta
from .errors import InternalError, PipelineError

logger = logging.getLogger(__name__)

PIPELINE_STEPS: list[StepEntry] = [
    StepEntry(name="raster_sample", module="pix2stl.steps.s01_raster_sample", config_key="sampling"),
    StepEntry(name="field_transform", module="pix2stl.steps.s02_field_transform", config_key="field"),
    StepEntry(name="mesh_build", module="pix2stl.steps.s03_mesh_build", config_key="mesh"),
    StepEntry(name="stl_serialize", module="pix2stl.steps.s04_stl_serialize", config_key="stl"),
]


def load_generation_config(config_path: Path) -> GenerationConfig:
    """Load and validate a generation config YAML. Missing keys take defaults."""
    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return GenerationConfig(**raw)


def import_step_class(module_path: str):
    """Dynamically import a step class from its module path.

    Expects module_path like 'pix2stl.steps.s01_raster_sample'
    and looks for a class ending in 'Step' in that module's step.py.
    """
    step_module = importlib.import_module(f"{module_path}.step")
    for attr_name in dir(step_module):
        attr = getattr(step_module, attr_name)
        if (
            isinstance(attr, type)
            and hasattr(attr, "run")
            and attr_name.endswith("Step")
            and attr_name != "BaseStep"
        ):
            return attr
    raise ImportError(f"No Step class found in {module_path}.step")


def run_pipeline(
    image_bytes: bytes,
    config: Optional[GenerationConfig] = None,
) -> Union[GenerationResult, PipelineFailure]:
    """Run all steps on one image.

    Every step gets its own slice of the config and the fields of the
    previous step's output. Any error stops the run and is returned as a
    PipelineFailure naming the step it came from.
    """
    config = config or GenerationConfig()
    logger.info(f"Pipeline '{config.strategy}' with {len(PIPELINE_STEPS)} steps")

    data: dict[str, Any] = {"image_bytes": image_bytes, "strategy": config.strategy}
    outputs: dict[str, BaseModel] = {}
    metas: list[StepMeta] = []

    for entry in PIPELINE_STEPS:
        logger.info(f"--- Step: {entry.name} ---")
        step_config = getattr(config, entry.config_key)
        try:
            step_cls = import_step_class(entry.module)
            step_instance = step_cls(config=step_config)
            step_input = step_cls.input_type(**data)
            output = step_instance.execute(step_input)
        except PipelineError as e:
            logger.error(f"[{entry.name}] {e.kind}: {e}")
            return PipelineFailure(kind=e.kind, message=str(e), step=entry.name)
        except Exception as e:
            logger.exception(f"[{entry.name}] Unexpected error")
            err = InternalError(f"{type(e).__name__}: {e}")
            return PipelineFailure(kind=err.kind, message=str(err), step=entry.name)

        outputs[entry.name] = output
        metas.append(StepMeta(
            step_name=entry.name,
            elapsed_seconds=step_instance.last_elapsed,
            params=step_config.model_dump(),
        ))
        # Iterating a model yields (field, value) without copying arrays
        data.update(dict(output))

    logger.info("Pipeline complete.")
    sampled = outputs["raster_sample"]
    serialized = outputs["stl_serialize"]
    return GenerationResult(
        stl_text=serialized.stl_text,
        strategy=config.strategy,
        num_triangles=serialized.num_facets,
        grid_width=sampled.width,
        grid_height=sampled.height,
        steps=metas,
    )


def generate_stl(
    image_bytes: bytes,
    config: Optional[GenerationConfig] = None,
) -> Union[str, PipelineFailure]:
    """STL text for the image, or the failure that stopped the run."""
    result = run_pipeline(image_bytes, config)
    if isinstance(result, PipelineFailure):
        return result
    return result.stl_text

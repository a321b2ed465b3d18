"""pix2stl core: pipeline runner, base step, shared contracts."""

from .step_base import BaseStep
from .contracts import GenerationConfig, GenerationResult, PipelineFailure, StepEntry, StepMeta
from .errors import DecodeError, DegenerateInputError, InternalError, PipelineError
from .mesh import Mesh, MeshAccumulator, Triangle
from .pipeline_runner import generate_stl, load_generation_config, run_pipeline
from .logging import setup_logging

__all__ = [
    "BaseStep",
    "GenerationConfig",
    "GenerationResult",
    "PipelineFailure",
    "StepEntry",
    "StepMeta",
    "DecodeError",
    "DegenerateInputError",
    "InternalError",
    "PipelineError",
    "Mesh",
    "MeshAccumulator",
    "Triangle",
    "generate_stl",
    "load_generation_config",
    "run_pipeline",
    "setup_logging",
]

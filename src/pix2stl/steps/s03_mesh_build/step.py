"""Step 03: Mesh build — field to flat-shaded triangle list.

Dispatches to one of two builders sharing the MeshBuilder interface:
- heightmap: displaced surface + floor
- outline: tapered cookie-cutter walls + base plate
"""

from __future__ import annotations

import logging
from typing import ClassVar

from pix2stl.core.step_base import BaseStep
from .config import MeshBuildConfig
from .contracts import MeshBuildInput, MeshBuildOutput

logger = logging.getLogger(__name__)


class MeshBuildStep(BaseStep[MeshBuildInput, MeshBuildOutput, MeshBuildConfig]):
    name: ClassVar[str] = "mesh_build"
    input_type: ClassVar = MeshBuildInput
    output_type: ClassVar = MeshBuildOutput
    config_type: ClassVar = MeshBuildConfig

    def validate_inputs(self, inputs: MeshBuildInput) -> bool:
        if inputs.field.ndim != 2 or inputs.field.size == 0:
            logger.error(f"Empty or non-2D field reached mesh build: {inputs.field.shape}")
            return False
        return True

    def run(self, inputs: MeshBuildInput) -> MeshBuildOutput:
        from ._registry import get_builder

        builder = get_builder(inputs.strategy)
        mesh = builder.build(inputs.field, self.config)

        bounds = mesh.bounds()
        logger.info(
            f"Built {len(mesh)} triangles with {type(builder).__name__}, "
            f"extent {bounds[1] - bounds[0]}"
        )
        return MeshBuildOutput(
            mesh=mesh,
            strategy=inputs.strategy,
            num_triangles=len(mesh),
            bounds=bounds.tolist(),
        )

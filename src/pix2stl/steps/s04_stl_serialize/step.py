"""Step 04: STL serialization — triangle list to ASCII STL text."""

from __future__ import annotations

import logging
from typing import ClassVar

from pix2stl.core.step_base import BaseStep
from .config import StlSerializeConfig
from .contracts import StlSerializeInput, StlSerializeOutput

logger = logging.getLogger(__name__)

DEFAULT_SOLID_NAMES = {
    "heightmap": "heightmap",
    "outline": "cookieCutter",
}


class StlSerializeStep(BaseStep[StlSerializeInput, StlSerializeOutput, StlSerializeConfig]):
    name: ClassVar[str] = "stl_serialize"
    input_type: ClassVar = StlSerializeInput
    output_type: ClassVar = StlSerializeOutput
    config_type: ClassVar = StlSerializeConfig

    def validate_inputs(self, inputs: StlSerializeInput) -> bool:
        if len(inputs.mesh) == 0:
            logger.error("Refusing to serialize an empty mesh")
            return False
        return True

    def run(self, inputs: StlSerializeInput) -> StlSerializeOutput:
        from ._stl_writer import format_stl

        name = self.config.solid_name or DEFAULT_SOLID_NAMES[inputs.strategy]
        text = format_stl(inputs.mesh, name, precision=self.config.float_precision)
        num_bytes = len(text.encode("utf-8"))

        logger.info(f"Serialized {len(inputs.mesh)} facets as 'solid {name}' ({num_bytes} bytes)")
        return StlSerializeOutput(
            stl_text=text,
            solid_name=name,
            num_facets=len(inputs.mesh),
            num_bytes=num_bytes,
        )

"""Typed pipeline step base class.

A step is constructed with a frozen config model and then fed one input model
per run. The runner builds that input from the fields of the previous step's
output, so field names double as the wiring between steps.
"""

from __future__ import annotations

import time
import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar, ClassVar

from pydantic import BaseModel

from .errors import InternalError, PipelineError

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)
ConfigT = TypeVar("ConfigT", bound=BaseModel)

logger = logging.getLogger(__name__)


class BaseStep(ABC, Generic[InputT, OutputT, ConfigT]):
    """One stage of the image-to-STL pipeline.

    Subclasses set ``name``, ``input_type``, ``output_type`` and
    ``config_type`` and implement ``validate_inputs`` and ``run``. A step keeps
    no state between runs apart from ``last_elapsed``.

    Example:
        class StlSerializeStep(BaseStep[StlSerializeInput, StlSerializeOutput, StlSerializeConfig]):
            name = "stl_serialize"
            input_type = StlSerializeInput
            output_type = StlSerializeOutput
            config_type = StlSerializeConfig
    """

    name: ClassVar[str] = ""
    input_type: ClassVar[type[BaseModel]]
    output_type: ClassVar[type[BaseModel]]
    config_type: ClassVar[type[BaseModel]]
    # Raised by execute() when validate_inputs() rejects the inputs
    input_error: ClassVar[type[PipelineError]] = InternalError

    def __init__(self, config: ConfigT | None = None):
        self.config = config if config is not None else self.config_type()
        self.last_elapsed = 0.0

    @abstractmethod
    def run(self, inputs: InputT) -> OutputT:
        """Transform one input model into one output model."""
        ...

    @abstractmethod
    def validate_inputs(self, inputs: InputT) -> bool:
        """False when the inputs cannot be processed; the step logs why."""
        ...

    def execute(self, inputs: InputT) -> OutputT:
        """Validate, run and time one step."""
        step_name = self.name or self.__class__.__name__

        if not self.validate_inputs(inputs):
            raise self.input_error(f"[{step_name}] Input validation failed")

        logger.info(f"[{step_name}] Starting...")
        t0 = time.perf_counter()
        result = self.run(inputs)
        self.last_elapsed = time.perf_counter() - t0
        logger.info(f"[{step_name}] Done in {self.last_elapsed:.3f}s")
        return result

    @classmethod
    def get_config_schema(cls) -> dict:
        """JSON schema of this step's config model."""
        return cls.config_type.model_json_schema()

"""Common interface for the mesh building strategies."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import ClassVar

import numpy as np

from pix2stl.core.errors import InternalError
from pix2stl.core.mesh import Mesh
from .config import MeshBuildConfig

logger = logging.getLogger(__name__)


class MeshBuilder(ABC):
    """Turns a 2D field into a flat-shaded triangle mesh.

    Builders are stateless: one instance can serve any number of runs.
    """

    strategy: ClassVar[str] = ""

    @abstractmethod
    def build(self, field: np.ndarray, config: MeshBuildConfig) -> Mesh:
        """Emit the full mesh for this field."""
        ...

    @staticmethod
    def check_field(field: np.ndarray) -> None:
        if field.ndim != 2 or field.size == 0:
            raise InternalError(f"Mesh builder received an empty or non-2D field {field.shape}")

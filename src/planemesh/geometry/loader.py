"""
Loading and saving triangulations.

YAML and JSON documents hold the nodes and triangles directly; mesh formats
(STL, OBJ, PLY, OFF) go through trimesh and are projected onto the XY plane.
"""

import json
import logging
from pathlib import Path
from typing import Any

import numpy as np
import trimesh
import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from planemesh.core.config import MeshSettings
from planemesh.core.exceptions import GeometryError
from planemesh.geometry.conversion import MeshConverter
from planemesh.mesh.triangulation import Triangulation

logger = logging.getLogger(__name__)


class MeshDocument(BaseModel):
    """Serialized form of a triangulation."""

    nodes: list[tuple[float, float]] = Field(default_factory=list)
    triangles: list[tuple[int, int, int]] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_indices(self) -> "MeshDocument":
        count = len(self.nodes)
        for t, triangle in enumerate(self.triangles):
            if any(i < 0 or i >= count for i in triangle):
                raise ValueError(f"triangle {t} references a missing node: {triangle}")
        return self

    @classmethod
    def from_mesh(cls, mesh: Triangulation) -> "MeshDocument":
        points, triangles = MeshConverter.to_arrays(mesh)
        return cls(nodes=points.tolist(), triangles=triangles.tolist())

    def to_mesh(self, settings: MeshSettings | None = None) -> Triangulation:
        return MeshConverter.from_triangles(
            np.array(self.nodes, dtype=float).reshape(-1, 2),
            np.array(self.triangles, dtype=np.int64).reshape(-1, 3),
            settings,
        )


class MeshLoader:
    """
    Loads and saves triangulations in document and mesh file formats.
    """

    DOCUMENT_FORMATS = {".yaml", ".yml", ".json"}
    MESH_FORMATS = {".stl", ".obj", ".ply", ".off"}

    @classmethod
    def supported_formats(cls) -> set[str]:
        return cls.DOCUMENT_FORMATS | cls.MESH_FORMATS

    @classmethod
    def load(
        cls,
        file_path: str | Path,
        settings: MeshSettings | None = None,
        **kwargs: Any,
    ) -> Triangulation:
        """
        Load a triangulation from file.

        Args:
            file_path: Path to a mesh file
            settings: Settings for the new triangulation
            **kwargs: Additional arguments passed to trimesh.load

        Returns:
            Triangulation

        Raises:
            GeometryError: If the file is missing, the format is unsupported
                or the content is invalid
        """
        path = Path(file_path)

        if not path.exists():
            raise GeometryError(f"File not found: {path}")

        suffix = path.suffix.lower()
        if suffix not in cls.supported_formats():
            raise GeometryError(
                f"Unsupported format: {path.suffix}. "
                f"Supported formats: {sorted(cls.supported_formats())}"
            )

        if suffix in cls.DOCUMENT_FORMATS:
            mesh = cls._load_document(path, settings)
        else:
            mesh = cls._load_mesh_file(path, settings, **kwargs)

        logger.info(
            "Loaded %s: %d nodes, %d faces",
            path.name, mesh.number_of_nodes(), mesh.number_of_faces(),
        )
        return mesh

    @classmethod
    def save(cls, mesh: Triangulation, file_path: str | Path, **kwargs: Any) -> None:
        """
        Save a triangulation to file.

        Args:
            mesh: Triangulation to save
            file_path: Output file path; the suffix selects the format
            **kwargs: Additional arguments passed to trimesh.export

        Raises:
            GeometryError: If the format is unsupported or saving fails
        """
        path = Path(file_path)
        suffix = path.suffix.lower()

        if suffix not in cls.supported_formats():
            raise GeometryError(
                f"Unsupported format: {path.suffix}. "
                f"Supported formats: {sorted(cls.supported_formats())}"
            )

        try:
            if suffix in cls.DOCUMENT_FORMATS:
                data = MeshDocument.from_mesh(mesh).model_dump(mode="json")
                with open(path, "w") as f:
                    if suffix == ".json":
                        json.dump(data, f, indent=2)
                    else:
                        yaml.safe_dump(data, f, default_flow_style=None, sort_keys=False)
            else:
                MeshConverter.to_trimesh(mesh).export(str(path), **kwargs)
        except GeometryError:
            raise
        except Exception as e:
            raise GeometryError(f"Failed to save mesh to {path}: {e}") from e

        logger.info("Saved %s", path.name)

    @staticmethod
    def _load_document(path: Path, settings: MeshSettings | None) -> Triangulation:
        try:
            with open(path) as f:
                if path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
            document = MeshDocument(**(data or {}))
        except (yaml.YAMLError, json.JSONDecodeError, ValidationError, TypeError) as e:
            raise GeometryError(
                f"Failed to load mesh document: {path}", details={"error": str(e)}
            ) from e
        return document.to_mesh(settings)

    @staticmethod
    def _load_mesh_file(
        path: Path, settings: MeshSettings | None, **kwargs: Any
    ) -> Triangulation:
        try:
            loaded = trimesh.load(str(path), **kwargs)
        except Exception as e:
            raise GeometryError(f"Failed to load geometry from {path}: {e}") from e

        # Handle Scene vs Mesh
        if isinstance(loaded, trimesh.Scene):
            parts = [g for g in loaded.geometry.values() if isinstance(g, trimesh.Trimesh)]
            if not parts:
                raise GeometryError(f"No triangle mesh found in {path}")
            loaded = trimesh.util.concatenate(parts)
        elif not isinstance(loaded, trimesh.Trimesh):
            raise GeometryError(f"Unexpected geometry type: {type(loaded)}")

        return MeshConverter.from_trimesh(loaded, settings)

"""
Active editor context.

Tracks the file currently focused in the editor and works out which known
dbt project owns it.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from ..config import DEFAULT_MODEL_EXTENSIONS
from .store import ProjectGraphStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActiveFile:
    """
    Identity of the focused file.

    Attributes:
        path: Absolute path of the file.
        base_name: File name with a model extension stripped
            ("orders.sql" -> "orders"). Other extensions are kept.
    """
    path: Path
    base_name: str

    @property
    def url(self) -> str:
        return str(self.path)

    @classmethod
    def from_path(
        cls,
        path: Union[str, Path],
        model_extensions: Iterable[str] = DEFAULT_MODEL_EXTENSIONS,
    ) -> "ActiveFile":
        path = Path(path)
        name = path.name
        for ext in model_extensions:
            if name.endswith(ext) and len(name) > len(ext):
                name = name[: -len(ext)]
                break
        return cls(path=path, base_name=name)


def find_owning_project(path: Path, project_ids: Iterable[str]) -> Optional[str]:
    """
    Return the innermost project root that contains `path`.

    Nested projects (a dbt package vendored inside another project) resolve
    to the deepest root.
    """
    best: Optional[str] = None
    best_depth = -1
    for project_id in project_ids:
        root = Path(project_id)
        if path == root or root in path.parents:
            depth = len(root.parts)
            if depth > best_depth:
                best, best_depth = project_id, depth
    return best


class ActiveContext:
    """
    The editor focus as seen by the lineage session.

    The owning project is derived on demand from the projects currently in
    the store, so it follows projects being added and removed.
    """

    def __init__(
        self,
        store: ProjectGraphStore,
        model_extensions: Iterable[str] = DEFAULT_MODEL_EXTENSIONS,
    ):
        self.store = store
        self.model_extensions = tuple(model_extensions)
        self._active: Optional[ActiveFile] = None

    @property
    def active_file(self) -> Optional[ActiveFile]:
        return self._active

    def set_active_file(self, path: Union[str, Path, None]) -> Optional[ActiveFile]:
        """Focus a file, or clear the focus with None."""
        if path is None:
            self._active = None
        else:
            self._active = ActiveFile.from_path(path, self.model_extensions)
            logger.debug(f"Active file: {self._active.path}")
        return self._active

    def project_id(self) -> Optional[str]:
        """Project owning the active file, or None if there is no match."""
        if self._active is None:
            return None
        return find_owning_project(self._active.path, self.store.project_ids())

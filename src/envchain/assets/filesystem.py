from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, Mapping, Union

from ..core.types import Asset


class FileSystemAssetRegistry:
    """Serves every file below a set of module root directories as an asset."""

    def __init__(self, roots: Mapping[str, Union[str, Path]]):
        """Initialize the registry.

        Args:
            roots: Module name mapped to the directory holding its assets.
        """
        self.roots: Dict[str, Path] = {module: Path(root) for module, root in roots.items()}

    @property
    def modules(self) -> list:
        return list(self.roots)

    def __iter__(self) -> Iterator[Asset]:
        for module, root in self.roots.items():
            if not root.is_dir():
                continue
            for path in sorted(p for p in root.rglob("*") if p.is_file()):
                yield Asset(
                    path=path.relative_to(root).as_posix(),
                    module=module,
                    content=path.read_bytes(),
                )

"""
Saving display resources to disk.
"""

from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

from loguru import logger

from .base import DisplayResource


class DownloadTrigger(ABC):
    """Abstract interface for saving a resource under a file name."""

    @abstractmethod
    def save(self, resource: DisplayResource, filename: str) -> Path:
        """
        Save a resource.

        Args:
            resource: Resource to save
            filename: Suggested file name (archive paths are reduced to their base name)

        Returns:
            Location the resource was written to

        Raises:
            ResourceReleasedError: If the resource was already released
        """
        pass


class DirectoryDownloader(DownloadTrigger):
    """
    Writes resources into a target directory.

    Entries from different folders or archives often share a base name
    (`a/0001.png`, `b/0001.png`). The second and later saves of a name get a
    numeric suffix (`0001-1.png`) instead of replacing an earlier save made by
    the same downloader.
    """

    def __init__(self, target_dir: Path | str):
        self.target_dir = Path(target_dir)
        self._used: dict[str, int] = {}

    def _unique_name(self, name: str) -> str:
        count = self._used.get(name, 0)
        self._used[name] = count + 1
        if count == 0:
            return name
        base = PurePosixPath(name)
        candidate = f"{base.stem}-{count}{base.suffix}"
        # a suffixed name can itself be a real entry name
        while candidate in self._used:
            count += 1
            candidate = f"{base.stem}-{count}{base.suffix}"
        self._used[name] = count + 1
        self._used[candidate] = 1
        return candidate

    def save(self, resource: DisplayResource, filename: str) -> Path:
        """Write the resource bytes to target_dir/<base name>, suffixed if already used."""
        data = resource.read()
        name = PurePosixPath(filename.replace("\\", "/")).name or "image"
        self.target_dir.mkdir(parents=True, exist_ok=True)
        path = self.target_dir / self._unique_name(name)
        path.write_bytes(data)
        logger.debug("Saved {} ({} bytes)", path, len(data))
        return path

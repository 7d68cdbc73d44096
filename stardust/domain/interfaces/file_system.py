import abc
from typing import Any

from stardust.domain.models.common import FilePath


class FileSystem(abc.ABC):
    """Interface for file system operations."""

    @abc.abstractmethod
    async def read_file(self, path: FilePath) -> str:
        """Reads the content of a file.

        Raises:
            FileNotFoundError: If the file does not exist.
            PermissionError: If the user lacks permission to read the file.
        """
        pass

    @abc.abstractmethod
    async def write_file(self, path: FilePath, content: str) -> None:
        """Writes content to a file, creating parent directories."""
        pass

    @abc.abstractmethod
    async def read_structured(self, path: FilePath) -> Any:
        """Reads and decodes a YAML or JSON document."""
        pass

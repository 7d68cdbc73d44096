"""Concrete implementation of the FileSystem interface for the local disk.

Uses `pathlib` for paths, `aiofiles` for async I/O and PyYAML to decode
structured input (YAML is a superset of JSON, so both formats load).
Also hosts the loaders that turn repository and catalog files into domain
objects.
"""

import logging
from pathlib import Path
from typing import Any, List

import aiofiles
import yaml

from stardust.domain.interfaces.file_system import FileSystem
from stardust.domain.models.catalog import CategoryCatalog
from stardust.domain.models.classification import RepoInfo
from stardust.domain.models.common import FilePath

logger = logging.getLogger(__name__)


class LocalFileSystem(FileSystem):
    """Implementation of FileSystem for the local disk."""

    async def read_file(self, file_path: FilePath) -> str:
        """Reads file content asynchronously."""
        path = Path(file_path)
        logger.debug(f"Attempting to read file: {path}")
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {file_path}")

        try:
            async with aiofiles.open(path, mode='r', encoding='utf-8') as f:
                content = await f.read()
        except PermissionError as e:
            logger.error(f"Permission denied reading file: {path}")
            raise PermissionError(f"Permission denied: {file_path}") from e
        logger.debug(f"Successfully read {len(content)} characters from {path}")
        return content

    async def write_file(self, file_path: FilePath, content: str) -> None:
        """Writes content to a file asynchronously, creating parent directories."""
        path = Path(file_path)
        logger.debug(f"Attempting to write {len(content)} characters to file: {path}")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, mode='w', encoding='utf-8') as f:
                await f.write(content)
        except PermissionError as e:
            logger.error(f"Permission denied writing file: {path}")
            raise PermissionError(f"Permission denied: {file_path}") from e
        logger.debug(f"Successfully wrote to {path}")

    async def read_structured(self, file_path: FilePath) -> Any:
        """Reads a YAML or JSON document.

        Raises:
            ValueError: If the file is not valid YAML/JSON.
        """
        content = await self.read_file(file_path)
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Could not parse {file_path}: {e}") from e


async def load_repositories(file_system: FileSystem, file_path: FilePath) -> List[RepoInfo]:
    """Loads repositories from a list of objects or "owner/name" strings.

    A mapping with a ``repositories`` key is accepted as well.
    """
    data = await file_system.read_structured(file_path)
    if isinstance(data, dict):
        data = data.get("repositories")
    if not isinstance(data, list):
        raise ValueError(f"{file_path} must contain a list of repositories")
    repos = [RepoInfo.from_value(entry) for entry in data]
    logger.info(f"Loaded {len(repos)} repositories from {file_path}")
    return repos


async def load_catalog(file_system: FileSystem, file_path: FilePath) -> CategoryCatalog:
    """Loads a category catalog from a list or a mapping with a ``categories`` list.

    Entries are objects with ``name``, ``description`` and ``keywords``, or
    bare category names.
    """
    data = await file_system.read_structured(file_path)
    if isinstance(data, dict):
        data = data.get("categories")
    if not isinstance(data, list):
        raise ValueError(f"{file_path} must contain a list of categories")
    catalog = CategoryCatalog.from_dicts(
        [{"name": entry} if isinstance(entry, str) else entry for entry in data]
    )
    if not len(catalog):
        logger.warning(f"Catalog {file_path} is empty; every repository will get the fallback category")
    logger.info(f"Loaded {len(catalog)} categories from {file_path}")
    return catalog

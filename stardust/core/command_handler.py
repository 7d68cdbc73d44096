"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), loads their input
files and delegates the work to the ClassificationService.
"""

import json
import logging
from typing import Optional

from stardust.core.services.classification_service import ClassificationService
from stardust.domain.interfaces.file_system import FileSystem
from stardust.domain.interfaces.user_interface import UserInterface
from stardust.domain.models.common import FilePath
from stardust.infrastructure.filesystem.local_fs import load_catalog, load_repositories

logger = logging.getLogger(__name__)


class CommandHandler:
    """Handles incoming commands and delegates to appropriate services."""

    def __init__(
        self,
        classification_service: ClassificationService,
        file_system: FileSystem,
        ui: UserInterface,
    ):
        """Initializes the CommandHandler with required services."""
        self.classification_service = classification_service
        self.file_system = file_system
        self.ui = ui

    @staticmethod
    def _log_progress(completed: int, total: int) -> None:
        logger.info(f"Classified {completed}/{total} repositories")

    async def handle_classify(
        self,
        repos_path: str,
        catalog_path: str,
        output_path: Optional[str] = None,
        single: bool = False,
    ) -> bool:
        """Handles the 'classify' command.

        Prints the id -> categories map as JSON and optionally writes it to
        ``output_path``.

        Returns:
            True on success, False if the inputs could not be loaded or the
            output could not be written.
        """
        logger.info(f"Handling 'classify' command: repos={repos_path}, catalog={catalog_path}, single={single}")
        try:
            repos = await load_repositories(self.file_system, FilePath(repos_path))
            catalog = await load_catalog(self.file_system, FilePath(catalog_path))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load classify inputs: {e}")
            self.ui.display_error(f"Could not load input: {e}")
            return False

        if not repos:
            self.ui.display_warning("No repositories to classify.")
            return True

        if single:
            report = await self.classification_service.classify_individually(
                repos, catalog, on_progress=self._log_progress
            )
        else:
            report = await self.classification_service.classify_repositories(
                repos, catalog, on_progress=self._log_progress
            )

        self.ui.display_json(report.assignments)
        if report.failed:
            self.ui.display_warning(
                f"{report.failure_count} repositories could not be classified: {', '.join(report.failed)}"
            )

        if output_path:
            try:
                await self.file_system.write_file(
                    FilePath(output_path), json.dumps(report.to_dict(), indent=2, ensure_ascii=False)
                )
            except OSError as e:
                logger.error(f"Failed to write results to {output_path}: {e}")
                self.ui.display_error(f"Could not write results: {e}")
                return False
            self.ui.display_info(f"Results written to {output_path}")

        return True

"""
Core service for classifying repositories into catalog categories.

Groups repositories into model-sized prompts, paces the groups through the
batch scheduler, sends each prompt through the rate-limited retrying
executor and recovers a complete, validated result from every response.
"""

import logging
from typing import List, Optional, Sequence

from stardust.core.prompts import build_batch_prompt, build_single_prompt
from stardust.domain.interfaces.ai_model import AIModel
from stardust.domain.models.ai import ChatMessage, StructuredAIResponse
from stardust.domain.models.catalog import CategoryCatalog
from stardust.domain.models.classification import ClassificationReport, RepoInfo, SingleClassification
from stardust.domain.models.common import ClassificationResult, MessageRole, PromptText
from stardust.domain.models.resilience import BatchOptions, ProgressCallback
from stardust.infrastructure.config.settings import ClassifierSettings
from stardust.infrastructure.parsing.response_recovery import (
    parse_batch_classification,
    parse_single_classification,
)
from stardust.infrastructure.resilience.api_retry import ApiRetryService
from stardust.infrastructure.resilience.batching import process_batch

logger = logging.getLogger(__name__)


class ClassificationService:
    """Orchestrates repository classification."""

    def __init__(
        self,
        ai_model: AIModel,
        api_retry_service: ApiRetryService,
        settings: Optional[ClassifierSettings] = None,
    ):
        """Initializes the ClassificationService with its dependencies."""
        self.ai_model = ai_model
        self.api_retry_service = api_retry_service
        self.settings = settings or ClassifierSettings()
        logger.info(
            f"ClassificationService initialized with AI model: {ai_model.__class__.__name__}"
        )

    async def _ask_model(self, prompt: PromptText, endpoint_name: str) -> StructuredAIResponse:
        messages: List[ChatMessage] = [
            {"role": MessageRole("user"), "content": prompt},
        ]
        return await self.api_retry_service.execute_with_retry(
            self.ai_model.send_messages,
            messages,
            endpoint_name=endpoint_name,
        )

    async def _classify_group(
        self, group: Sequence[RepoInfo], catalog: CategoryCatalog
    ) -> Optional[ClassificationResult]:
        """Classifies one group. Returns None when the model call fails for good."""
        prompt = build_batch_prompt(group, catalog, self.settings)
        try:
            response = await self._ask_model(prompt, "classify_batch")
        except Exception as e:
            logger.error(
                f"Classification of {len(group)} repo(s) failed after retries: {type(e).__name__}: {e}"
            )
            return None

        return parse_batch_classification(
            response.content,
            [repo.id for repo in group],
            catalog,
            self.settings.max_categories_per_repo,
        )

    async def classify_repositories(
        self,
        repos: Sequence[RepoInfo],
        catalog: CategoryCatalog,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ClassificationReport:
        """Classifies ``repos`` in groups of ``settings.batch_size``.

        ``on_progress`` receives (classified_repos, total_repos) after every
        round of groups. Groups whose model call still fails after retries
        are listed in ``ClassificationReport.failed``.
        """
        report = ClassificationReport()
        if not repos:
            return report

        size = self.settings.batch_size
        groups = [list(repos[start:start + size]) for start in range(0, len(repos), size)]
        # Repositories covered once the first n groups are done.
        covered = [0]
        for group in groups:
            covered.append(covered[-1] + len(group))

        def report_progress(completed_groups: int, total_groups: int) -> None:
            if on_progress:
                on_progress(covered[completed_groups], covered[total_groups])

        async def classify_group(group: List[RepoInfo], index: int) -> Optional[ClassificationResult]:
            logger.info(f"Classifying group {index + 1}/{len(groups)} ({len(group)} repo(s))")
            return await self._classify_group(group, catalog)

        options = BatchOptions(
            batch_size=max(1, self.settings.parallel_batches),
            batch_delay_ms=self.settings.batch_delay_ms,
            on_progress=report_progress,
        )
        outcomes = await process_batch(groups, classify_group, options)

        for group, outcome in zip(groups, outcomes):
            if outcome is None:
                report.failed.extend(repo.id for repo in group)
            else:
                report.assignments.update(outcome)

        logger.info(
            f"Classification finished: {report.success_count} classified, {report.failure_count} failed"
        )
        return report

    async def classify_repository(self, repo: RepoInfo, catalog: CategoryCatalog) -> SingleClassification:
        """Classifies one repository with the detailed single-repository prompt.

        Raises:
            The model call's last error once retries are exhausted.
        """
        prompt = build_single_prompt(repo, catalog, self.settings)
        response = await self._ask_model(prompt, "classify_single")
        result = parse_single_classification(
            response.content, catalog, self.settings.max_categories_per_repo
        )
        if result.reason:
            logger.warning(f"Defaulted categories for {repo.id}: {result.reason}")
        return result

    async def classify_individually(
        self,
        repos: Sequence[RepoInfo],
        catalog: CategoryCatalog,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ClassificationReport:
        """Classifies every repository with its own prompt.

        Runs ``settings.parallel_batches`` requests per round; a repository
        whose call fails after retries is listed in the report's ``failed``.
        """
        async def classify_one(repo: RepoInfo, index: int) -> Optional[SingleClassification]:
            try:
                return await self.classify_repository(repo, catalog)
            except Exception as e:
                logger.error(f"Classification of {repo.id} failed after retries: {type(e).__name__}: {e}")
                return None

        report = ClassificationReport()
        if not repos:
            return report

        options = BatchOptions(
            batch_size=max(1, self.settings.parallel_batches),
            batch_delay_ms=self.settings.batch_delay_ms,
            on_progress=on_progress,
        )
        outcomes = await process_batch(list(repos), classify_one, options)

        for repo, outcome in zip(repos, outcomes):
            if outcome is None:
                report.failed.append(repo.id)
            else:
                report.assignments[repo.id] = outcome.categories
        return report

"""Recovery of category assignments from raw model responses.

Both entry points share one rule: never fail the caller. Whatever the model
returned, the caller gets complete, catalog-valid results, with the
catalog's default category standing in wherever nothing usable was found.

Batch responses go through two independent paths:

* the primary path repairs and decodes the JSON document
  (``parse_results_document``) and validates its entries
  (``collect_parsed_assignments``);
* if anything in the primary path raises, a pattern scan over the raw text
  (``scan_fallback_assignments``) salvages whatever id/categories pairs are
  still readable.

Either way ``fill_missing_with_default`` guarantees one entry per requested
id.
"""

import json
import logging
import re
from typing import Any, Iterable, List

from stardust.domain.models.catalog import CategoryCatalog
from stardust.domain.models.classification import SingleClassification
from stardust.domain.models.common import CategoryName, ClassificationResult, RepoId
from stardust.infrastructure.parsing.json_repair import attempt_repair

logger = logging.getLogger(__name__)

# An id field followed, before any closing brace, by a categories list.
FALLBACK_ENTRY_PATTERN = re.compile(
    r'"id"\s*:\s*"([^"]+)"[^}]*?"categories"\s*:\s*\[([^\]]*)\]'
)

SINGLE_PARSE_FAILURE_REASON = "Parsing failed, using default category"


class MalformedResponseError(ValueError):
    """Raised when a decoded response does not have the expected shape."""


def parse_results_document(text: str) -> List[Any]:
    """Repairs and decodes a batch response, returning its ``results`` list.

    Raises:
        ValueError: On undecodable text or a document without a results list.
    """
    document = json.loads(attempt_repair(text))
    if not isinstance(document, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(document).__name__}")
    results = document.get("results")
    if not isinstance(results, list):
        raise MalformedResponseError("Response has no 'results' list")
    return results


def collect_parsed_assignments(
    entries: Iterable[Any],
    catalog: CategoryCatalog,
    max_categories_per_repo: int,
) -> ClassificationResult:
    """Validates decoded entries against the catalog.

    Entries without a usable id or a categories list are skipped. An entry
    whose categories are all invalid gets the default category.
    """
    assignments: ClassificationResult = {}
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        repo_id = entry.get("id")
        categories = entry.get("categories")
        if not repo_id or not isinstance(repo_id, str) or not isinstance(categories, list):
            logger.debug(f"Skipping incomplete result entry: {entry!r}")
            continue
        assignments[RepoId(repo_id)] = catalog.select_or_default(categories, max_categories_per_repo)
    return assignments


def _split_quoted_list(body: str) -> List[str]:
    return [part.strip().replace('"', "") for part in body.split(",")]


def scan_fallback_assignments(
    text: str,
    catalog: CategoryCatalog,
    max_categories_per_repo: int,
) -> ClassificationResult:
    """Extracts id/categories pairs from text that is not decodable JSON.

    The first match with at least one valid category wins for each id.
    """
    assignments: ClassificationResult = {}
    for match in FALLBACK_ENTRY_PATTERN.finditer(text or ""):
        repo_id = RepoId(match.group(1))
        if repo_id in assignments:
            continue
        categories = catalog.select_valid(_split_quoted_list(match.group(2)), max_categories_per_repo)
        if categories:
            assignments[repo_id] = categories
    return assignments


def fill_missing_with_default(
    assignments: ClassificationResult,
    requested_ids: Iterable[str],
    catalog: CategoryCatalog,
) -> ClassificationResult:
    """Adds the default category for every requested id that has no entry."""
    missing = []
    for repo_id in requested_ids:
        if repo_id not in assignments:
            assignments[RepoId(repo_id)] = [catalog.default_category]
            missing.append(repo_id)
    if missing:
        logger.warning(f"Model returned no usable data for {len(missing)} repo(s): {', '.join(missing)}")
    return assignments


def parse_batch_classification(
    text: str,
    requested_ids: Iterable[str],
    catalog: CategoryCatalog,
    max_categories_per_repo: int,
) -> ClassificationResult:
    """Turns a batch response into a complete id -> categories map.

    Never raises for malformed input; every id in ``requested_ids`` is
    present in the returned map.
    """
    requested = list(requested_ids)
    try:
        entries = parse_results_document(text)
        assignments = collect_parsed_assignments(entries, catalog, max_categories_per_repo)
    except (ValueError, RecursionError) as e:
        snippet = (text or "")[:200].replace("\n", "\\n")
        logger.warning(f"Batch response could not be parsed ({e}); scanning raw text instead: {snippet}")
        assignments = scan_fallback_assignments(text, catalog, max_categories_per_repo)

    return fill_missing_with_default(assignments, requested, catalog)


def parse_single_classification(
    text: str,
    catalog: CategoryCatalog,
    max_categories_per_repo: int,
) -> SingleClassification:
    """Parses a single-repository response of the form {"categories": [...]}.

    No truncation repair is attempted. On any failure the default category
    is returned together with a diagnostic reason.
    """
    try:
        document = json.loads(text.strip())
        if not isinstance(document, dict) or not isinstance(document.get("categories"), list):
            raise MalformedResponseError("Response has no 'categories' list")
    except (ValueError, AttributeError, RecursionError) as e:
        logger.warning(f"Single classification response could not be parsed: {e}")
        return SingleClassification(
            categories=[catalog.default_category],
            reason=f"{SINGLE_PARSE_FAILURE_REASON}: {e}",
        )

    categories: List[CategoryName] = catalog.select_or_default(
        document["categories"], max_categories_per_repo
    )
    return SingleClassification(categories=categories, reason="")

"""Prompt builders for repository classification.

Both prompts ask the model for a bare JSON document; the batch prompt's
shape is what ``parse_batch_classification`` expects, the single prompt's
shape is what ``parse_single_classification`` expects.
"""

from typing import List, Optional, Sequence

from stardust.domain.models.catalog import CategoryCatalog
from stardust.domain.models.classification import RepoInfo
from stardust.domain.models.common import PromptText
from stardust.infrastructure.config.settings import ClassifierSettings


def _or_none(value: Optional[str]) -> str:
    return value if value else "None"


def _flatten_readme(readme: Optional[str], max_length: int) -> str:
    if not readme:
        return "None"
    return readme[:max_length].replace("\r", " ").replace("\n", " ")


def _format_batch_categories(catalog: CategoryCatalog) -> str:
    return "\n".join(
        f"- {category.name}: {category.description}" if category.description else f"- {category.name}"
        for category in catalog
    )


def build_batch_prompt(
    repos: Sequence[RepoInfo],
    catalog: CategoryCatalog,
    settings: ClassifierSettings,
) -> PromptText:
    """Builds one prompt that classifies every repository in ``repos``."""
    count = len(repos)
    repo_lines: List[str] = []
    for number, repo in enumerate(repos, start=1):
        repo_lines.append(
            f"{number}. {repo.id}\n"
            f"   Description: {_or_none(repo.description)}\n"
            f"   Language: {_or_none(repo.language)}\n"
            f"   Stars: {repo.stars}\n"
            f"   README: {_flatten_readme(repo.readme, settings.readme_max_length)}"
        )

    prompt = f"""You are organizing {count} GitHub repositories into categories.

## Available Categories ({len(catalog)})
{_format_batch_categories(catalog)}

## Repositories
{chr(10).join(repo_lines)}

## Requirements
- Classify all {count} repositories.
- Assign each repository at least {settings.min_categories_per_repo}, maximum {settings.max_categories_per_repo} categories.
- Use only category names from the list above, spelled exactly as given.
- Use the repository id exactly as given (owner/name).

## Output Format
Respond with JSON only, no explanations:
{{"results": [{{"id": "owner/name", "categories": ["Category A", "Category B"]}}]}}
"""
    return PromptText(prompt)


def build_single_prompt(
    repo: RepoInfo,
    catalog: CategoryCatalog,
    settings: ClassifierSettings,
) -> PromptText:
    """Builds a detailed prompt for classifying one repository."""
    if repo.readme:
        readme = repo.readme[:settings.readme_max_length_single]
        if len(repo.readme) > settings.readme_max_length_single:
            readme += "..."
    else:
        readme = "No README"

    category_lines = []
    for number, category in enumerate(catalog, start=1):
        line = f"{number}. {category.name}: {category.description}"
        if category.keywords:
            line += f" (keywords: {', '.join(category.keywords)})"
        category_lines.append(line)

    prompt = f"""Classify the following GitHub repository.

## Repository
Name: {repo.id}
Description: {_or_none(repo.description)}
Primary Language: {_or_none(repo.language)}
Stars: {repo.stars}

## README
{readme}

## Available Categories ({len(catalog)})
{chr(10).join(category_lines)}

## Requirements
Select {settings.min_categories_per_repo}-{settings.max_categories_per_repo} categories that best describe this repository.
Use only category names from the list above, spelled exactly as given.

## Output Format
Respond with JSON only, no explanations:
{{"categories": ["Category A", "Category B"]}}
"""
    return PromptText(prompt)

import pytest

from stardust.core.prompts import build_batch_prompt, build_single_prompt
from stardust.domain.models.classification import RepoInfo
from stardust.infrastructure.config.settings import ClassifierSettings


@pytest.fixture
def settings():
    return ClassifierSettings(readme_max_length=500, readme_max_length_single=2000)


def repo(repo_id="o/r", **kwargs):
    fields = {"description": "test", "language": "Go", "stars": 100, "readme": None}
    fields.update(kwargs)
    return RepoInfo(id=repo_id, **fields)


# --- batch prompt ---

def test_batch_prompt_lists_repositories_and_categories(catalog, settings):
    repos = [
        repo("owner1/repo1", description="First repo", language="Python", readme="README content"),
        repo("owner2/repo2", description="Second repo", language="JavaScript"),
    ]
    prompt = build_batch_prompt(repos, catalog, settings)

    for text in ["owner1/repo1", "owner2/repo2", "First repo", "Second repo",
                 "Lang: Python", "AI: LLM", "Web: Frontend", "Python projects", "Large language models"]:
        assert text in prompt
    assert "1. owner1/repo1" in prompt
    assert "2. owner2/repo2" in prompt


def test_batch_prompt_counts(catalog, settings):
    repos = [repo(f"o/r{i}") for i in range(1, 4)]
    prompt = build_batch_prompt(repos, catalog, settings)
    assert "3 GitHub repositories" in prompt
    assert "Classify all 3 repositories" in prompt
    assert "Available Categories (3)" in prompt


def test_batch_prompt_placeholders_for_missing_fields(catalog, settings):
    prompt = build_batch_prompt([repo(description=None, language=None, readme=None)], catalog, settings)
    assert "Description: None" in prompt
    assert "Language: None" in prompt
    assert "README: None" in prompt


def test_batch_prompt_truncates_and_flattens_readme(catalog, settings):
    prompt = build_batch_prompt([repo(readme="A" * 1000)], catalog, settings)
    assert "A" * 500 in prompt
    assert "A" * 501 not in prompt

    prompt = build_batch_prompt([repo(readme="Line1\nLine2\nLine3")], catalog, settings)
    assert "Line1 Line2 Line3" in prompt
    assert "Line1\n" not in prompt


def test_batch_prompt_category_bounds(catalog):
    settings = ClassifierSettings(min_categories_per_repo=2, max_categories_per_repo=5)
    prompt = build_batch_prompt([repo()], catalog, settings)
    assert "at least 2, maximum 5" in prompt


def test_batch_prompt_asks_for_results_document(catalog, settings):
    prompt = build_batch_prompt([repo()], catalog, settings)
    assert '{"results": [{"id": "owner/name", "categories": [' in prompt


# --- single prompt ---

@pytest.fixture
def react():
    return RepoInfo(
        id="facebook/react",
        description="A JavaScript library for building user interfaces",
        language="JavaScript",
        stars=200000,
        readme="# React\n\nA JavaScript library...",
    )


def test_single_prompt_includes_repository(catalog, settings, react):
    prompt = build_single_prompt(react, catalog, settings)
    for text in ["facebook/react", "A JavaScript library for building user interfaces",
                 "Primary Language: JavaScript", "200000", "# React"]:
        assert text in prompt


def test_single_prompt_truncates_long_readme(catalog, settings, react):
    react.readme = "X" * 5000
    prompt = build_single_prompt(react, catalog, settings)
    assert "X" * 2000 + "..." in prompt
    assert "X" * 2001 not in prompt


def test_single_prompt_short_readme_has_no_ellipsis(catalog, settings, react):
    react.readme = "Short README"
    prompt = build_single_prompt(react, catalog, settings)
    readme_section = prompt.split("## README")[1].split("##")[0]
    assert readme_section.strip() == "Short README"


def test_single_prompt_placeholders(catalog, settings, react):
    react.readme = None
    react.description = None
    react.language = None
    prompt = build_single_prompt(react, catalog, settings)
    assert "No README" in prompt
    assert "Description: None" in prompt
    assert "Primary Language: None" in prompt


def test_single_prompt_numbers_categories_with_keywords(catalog, settings, react):
    prompt = build_single_prompt(react, catalog, settings)
    assert "1. Lang: Python: Python projects (keywords: python, py)" in prompt
    assert "2. AI: LLM:" in prompt
    assert "3. Web: Frontend:" in prompt
    assert "llm, gpt" in prompt
    assert "Available Categories (3)" in prompt


def test_single_prompt_category_range(catalog, react):
    settings = ClassifierSettings(min_categories_per_repo=2, max_categories_per_repo=4)
    assert "2-4" in build_single_prompt(react, catalog, settings)

import pytest

from stardust.domain.models.classification import ClassificationReport, RepoInfo
from stardust.domain.models.resilience import RetryPolicy


def test_retry_policy_defaults():
    policy = RetryPolicy()
    assert (policy.max_retries, policy.initial_delay_ms, policy.max_delay_ms) == (3, 1000, 10000)
    assert policy.total_attempts == 4


def test_delay_for_retry_doubles_and_caps():
    policy = RetryPolicy(max_retries=10, initial_delay_ms=1000, max_delay_ms=10000)
    assert [policy.delay_for_retry(k) for k in range(1, 7)] == [1000, 2000, 4000, 8000, 10000, 10000]
    with pytest.raises(ValueError):
        policy.delay_for_retry(0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_retries": -1},
        {"initial_delay_ms": 0},
        {"initial_delay_ms": 500, "max_delay_ms": 100},
    ],
)
def test_retry_policy_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)


def test_repo_info_from_string():
    repo = RepoInfo.from_value("  torvalds/linux ")
    assert repo.id == "torvalds/linux"
    assert repo.description is None
    assert repo.stars == 0


def test_repo_info_from_owner_and_name():
    repo = RepoInfo.from_value({"owner": "pallets", "name": "flask", "stars": "68000", "language": "Python"})
    assert repo.id == "pallets/flask"
    assert repo.stars == 68000
    assert repo.language == "Python"


@pytest.mark.parametrize("value", ["", {"description": "anonymous"}, {"owner": "only-owner"}, 42, ["owner/name"]])
def test_repo_info_requires_id(value):
    with pytest.raises(ValueError):
        RepoInfo.from_value(value)


def test_report_counts_and_dict():
    report = ClassificationReport(assignments={"o/a": ["AI: LLM"]}, failed=["o/b", "o/c"])
    assert report.success_count == 1
    assert report.failure_count == 2
    assert report.to_dict() == {"assignments": {"o/a": ["AI: LLM"]}, "failed": ["o/b", "o/c"]}

"""Domain models for repository classification requests and outcomes."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from .common import CategoryName, ClassificationResult, RepoId


@dataclass
class RepoInfo:
    """What the classifier knows about one repository."""
    id: RepoId
    description: Optional[str] = None
    language: Optional[str] = None
    stars: int = 0
    readme: Optional[str] = None

    @classmethod
    def from_value(cls, value: Union[str, Mapping[str, Any]]) -> "RepoInfo":
        """Accepts a bare "owner/name" string or a mapping.

        Mappings may carry ``id`` directly or ``owner`` and ``name``.
        """
        if isinstance(value, str):
            repo_id = value.strip()
            if not repo_id:
                raise ValueError("Repository id must not be empty")
            return cls(id=RepoId(repo_id))
        if not isinstance(value, Mapping):
            raise ValueError(f"Repository entry must be a string or a mapping, got {type(value).__name__}")

        repo_id = str(value.get("id") or "").strip()
        if not repo_id and value.get("owner") and value.get("name"):
            repo_id = f"{value['owner']}/{value['name']}"
        if not repo_id:
            raise ValueError(f"Repository entry has no id: {dict(value)}")
        return cls(
            id=RepoId(repo_id),
            description=value.get("description"),
            language=value.get("language"),
            stars=int(value.get("stars") or 0),
            readme=value.get("readme"),
        )


@dataclass
class SingleClassification:
    """Result of classifying one repository.

    ``reason`` is empty on success and carries a diagnostic when the
    default category had to be substituted because parsing failed.
    """
    categories: List[CategoryName]
    reason: str = ""


@dataclass
class ClassificationReport:
    """Aggregated outcome of a multi-batch classification run."""
    assignments: ClassificationResult = field(default_factory=dict)
    failed: List[RepoId] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.assignments)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "assignments": {repo_id: list(cats) for repo_id, cats in self.assignments.items()},
            "failed": list(self.failed),
        }

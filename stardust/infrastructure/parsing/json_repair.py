"""Heuristic repair of truncated JSON documents.

Model output is often cut off mid-stream. The helpers here are pure string
transformations, kept as separate steps so each can be exercised on its own:

1. ``strip_code_fences`` removes a Markdown fence around the payload.
2. ``truncate_incomplete_tail`` drops an object that was opened after the
   last closing brace but never finished.
3. ``count_delimiters`` measures how many brackets and braces are left open.
4. ``attempt_repair`` ties them together and appends the missing closers.

The result is a best-effort document; ``json.loads`` still decides whether
it is usable.
"""

import re
from dataclasses import dataclass

_OPENING_FENCE = re.compile(r"^```(?:json)?\s*\n?", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\n?\s*```\s*$")


class UnrecoverableResponseError(ValueError):
    """Raised when the text cannot be turned into a candidate document."""


@dataclass(frozen=True)
class DelimiterCounts:
    open_braces: int
    close_braces: int
    open_brackets: int
    close_brackets: int

    @property
    def missing_braces(self) -> int:
        return max(0, self.open_braces - self.close_braces)

    @property
    def missing_brackets(self) -> int:
        return max(0, self.open_brackets - self.close_brackets)


def strip_code_fences(text: str) -> str:
    """Removes a leading ```/```json fence and its closing fence, if present."""
    trimmed = text.strip()
    defenced = _OPENING_FENCE.sub("", trimmed, count=1)
    defenced = _CLOSING_FENCE.sub("", defenced)
    return defenced.strip()


def count_delimiters(text: str) -> DelimiterCounts:
    """Counts raw brace and bracket characters (string contents included)."""
    return DelimiterCounts(
        open_braces=text.count("{"),
        close_braces=text.count("}"),
        open_brackets=text.count("["),
        close_brackets=text.count("]"),
    )


def truncate_incomplete_tail(text: str) -> str:
    """Cuts the text after its last '}' when what follows opens an unfinished object."""
    last_complete = text.rfind("}")
    if last_complete <= 0:
        return text
    tail = text[last_complete + 1:]
    if "{" in tail and "}" not in tail:
        return text[:last_complete + 1]
    return text


def drop_trailing_separator(text: str) -> str:
    """Removes a dangling comma left behind by truncation."""
    return text.rstrip().rstrip(",").rstrip()


def attempt_repair(text: str) -> str:
    """Returns a candidate JSON document for possibly truncated ``text``.

    Text that already ends with '}' is returned as-is (after trimming and
    fence removal).

    Raises:
        UnrecoverableResponseError: If there is nothing to repair.
    """
    if not isinstance(text, str):
        raise UnrecoverableResponseError(f"Expected text, got {type(text).__name__}")

    candidate = strip_code_fences(text)
    if not candidate:
        raise UnrecoverableResponseError("Response is empty")
    if candidate.endswith("}"):
        return candidate

    candidate = drop_trailing_separator(truncate_incomplete_tail(candidate))
    counts = count_delimiters(candidate)
    return candidate + "]" * counts.missing_brackets + "}" * counts.missing_braces

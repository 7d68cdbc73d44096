"""Interface for presenting results and messages to the user.

Defines the contract for displaying information, errors, warnings and
command output, allowing different UI implementations.
"""

import abc
from typing import Any


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_output(self, output: str, **kwargs: Any) -> None:
        """Displays standard output to the user."""
        pass

    @abc.abstractmethod
    def display_json(self, data: Any) -> None:
        """Displays a JSON-serializable structure to the user."""
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user."""
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user."""
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass

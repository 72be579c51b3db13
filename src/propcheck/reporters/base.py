"""Abstract base reporter class for propcheck.

Reporters turn a list of Report objects (one per property) into an output
format: console text, JSON or JUnit XML.

Example:
    >>> class CountReporter(BaseReporter):
    ...     @property
    ...     def file_extension(self) -> str:
    ...         return ".txt"
    ...
    ...     def generate(self, reports: list[Report]) -> str:
    ...         return f"{len(reports)} properties"
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from propcheck.core.result import Report


class BaseReporter(ABC):
    """Base class for all reporters.

    Attributes:
        output_path: Optional default path for saving reports.
    """

    def __init__(self, output_path: str | Path | None = None) -> None:
        self.output_path = Path(output_path) if output_path else None

    @abstractmethod
    def generate(self, reports: list[Report]) -> str:
        """Render the reports. Must handle an empty list."""
        ...

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """File extension including the dot (e.g. '.json')."""
        ...

    def save(self, reports: list[Report], path: str | Path | None = None) -> Path:
        """Write the generated report, creating parent directories.

        Raises:
            ValueError: If no path is given here or in the constructor.
        """
        output_path = Path(path) if path else self.output_path
        if not output_path:
            raise ValueError(
                "Output path required for saving report. "
                "Provide 'path' argument or set 'output_path' in constructor."
            )

        content = self.generate(reports)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        return output_path

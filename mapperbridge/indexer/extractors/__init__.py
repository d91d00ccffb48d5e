"""Extractor framework for the mapper indexer.

This module defines the BaseExtractor abstract class and the ExtractorRegistry
for discovery and registration of the mapper extractors.

All extractors here are deliberately shallow pattern matchers that run on
sanitized text (see indexer/sanitizer.py). They never raise on malformed
input: a file that does not look like a mapper yields None or an empty list.
"""

import bisect
import importlib
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Any
from urllib.parse import urlparse

from ..models import SourcePosition
from ...utils.logging import logger


class LineMap:
    """Offset -> (line, column) conversion for one text."""

    def __init__(self, text: str):
        self._starts = [0]
        start = text.find("\n")
        while start != -1:
            self._starts.append(start + 1)
            start = text.find("\n", start + 1)

    def position(self, offset: int) -> SourcePosition:
        line = bisect.bisect_right(self._starts, offset) - 1
        return SourcePosition(line, offset - self._starts[line])


class BaseExtractor(ABC):
    """Abstract base class for the mapper file extractors."""

    #: Short name used in logs and counters ("java", "xml")
    kind: str = ""

    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """Return list of file extensions this extractor supports.

        Returns:
            List of file extensions (e.g., ['.java'])
        """
        pass

    @abstractmethod
    def parse(self, uri: str, content: str) -> Any | None:
        """Parse raw file content into a mapper document.

        Args:
            uri: Identity of the file
            content: Raw (unsanitized) file content

        Returns:
            A document, or None when the file is not a mapper
        """
        pass

    def cleanup(self) -> None:
        """Release extractor resources. Default: no-op."""
        pass


def _extension_of(uri: str) -> str:
    path = urlparse(uri).path if "://" in uri else uri
    return PurePosixPath(path.replace("\\", "/")).suffix.lower()


class ExtractorRegistry:
    """Registry of extractors keyed by the file extensions they support.

    Design:
    - One extractor class per module (java.py -> JavaMapperExtractor)
    - Extractors register themselves via supported_extensions()
    - No hardcoded mapping - modules in this package are discovered
    """

    def __init__(self):
        self.extractors: dict[str, BaseExtractor] = {}
        self._discover()

    def _discover(self):
        """Import every module in this package and register BaseExtractor subclasses."""
        extractor_dir = Path(__file__).parent

        for file_path in sorted(extractor_dir.glob("*.py")):
            if file_path.name.startswith("_"):
                continue

            module = importlib.import_module(f".{file_path.stem}", package=__name__)

            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if (
                    isinstance(attr, type)
                    and issubclass(attr, BaseExtractor)
                    and attr is not BaseExtractor
                    and attr.__module__ == module.__name__
                ):
                    extractor = attr()
                    for ext in extractor.supported_extensions():
                        self.extractors[ext] = extractor
                    logger.debug("Registered {} extractor from {}", extractor.kind, module.__name__)

    def for_uri(self, uri: str) -> BaseExtractor | None:
        """Return the extractor responsible for a file, or None."""
        return self.extractors.get(_extension_of(uri))

    def cleanup(self) -> None:
        for extractor in set(self.extractors.values()):
            extractor.cleanup()


__all__ = ["BaseExtractor", "ExtractorRegistry", "LineMap"]

import xml.etree.ElementTree as ET
from abc import ABC
from typing import Any, Dict, List, Optional

from harvest.logging import get_logger
from harvest.model.label import MetadataRecord, ParsedLabel


class BaseLabelExtractor(ABC):
    """
    Base class for all label metadata extractors.
    """

    def __init__(self, debug: bool = False):
        """
        Initialize the base label extractor.

        Args:
            debug: Enable debug logging for detailed extraction information
        """
        self.debug = debug
        self.logger = get_logger(self.__class__.__name__)

    @staticmethod
    def _child_text(element: ET.Element, name: str) -> Optional[str]:
        """
        Stripped text of the first direct child with local name `name`.

        Args:
            element: Parent element
            name: Local name of the child, namespace ignored

        Returns:
            Child text, or None when the child is missing or blank
        """
        child = element.find(f"{{*}}{name}")
        if child is None or child.text is None:
            return None
        return child.text.strip() or None

    @staticmethod
    def _all_text(parsed: ParsedLabel, path: str) -> List[str]:
        """Unique non-blank texts of every element matching `path`, in document order."""
        values = []
        for element in parsed.findall(path):
            text = (element.text or "").strip()
            if text and text not in values:
                values.append(text)
        return values

    @staticmethod
    def _normalize_whitespace(value: str) -> str:
        return " ".join(value.split())

    def _log_fields(self, record: MetadataRecord, fields: Dict[str, Any]) -> None:
        if self.debug:
            self.logger.debug(f"Extracted {len(fields)} fields for {record.label_file.filename}: {list(fields)}")

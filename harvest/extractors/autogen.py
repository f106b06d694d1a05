"""
Fields generated for every leaf element of a label.

Keys follow the `<prefix>:<Class>/<prefix>:<attribute>` form, values are lists
in document order. A data dictionary maps keys to a `DataType` used to convert
the raw text.
"""

import re
import xml.etree.ElementTree as ET
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from harvest.config import Job
from harvest.errors import AutogenError
from harvest.extractors.base_extractor import BaseLabelExtractor
from harvest.model.enums import DataType
from harvest.model.label import LabelFile, MetadataRecord, ParsedLabel, local_name

_DATE_FORMATS = [
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d",
    "%Y-%m",
    "%Y-%jT%H:%M:%S.%f",
    "%Y-%jT%H:%M:%S",
    "%Y-%j",
    "%Y",
]
# strptime %f takes at most 6 digits
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+$")

_BOOLEANS = {"true": True, "1": True, "false": False, "0": False}


def normalize_date(value: str) -> str:
    """Convert a PDS date or date-time to `YYYY-MM-DDTHH:MM:SS.mmmZ`."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1]
    text = _LONG_FRACTION.sub(r"\1", text)
    for fmt in _DATE_FORMATS:
        try:
            dt = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
    raise ValueError(f"Unsupported date format: {value}")


def convert_value(value: str, data_type: DataType) -> Any:
    if data_type == DataType.DATE:
        return normalize_date(value)
    if data_type == DataType.INTEGER:
        return int(value)
    if data_type == DataType.REAL:
        return float(value)
    if data_type == DataType.BOOLEAN:
        try:
            return _BOOLEANS[value.strip().lower()]
        except KeyError:
            raise ValueError(f"Not a boolean: {value}")
    return value


@lru_cache(maxsize=32)
def load_dictionary(paths: Tuple[str, ...]) -> Dict[str, DataType]:
    """
    Load and merge data dictionary files (YAML or JSON, `key: type`).

    Results are cached per tuple of paths, so a job's dictionary is read once per run.
    """
    dictionary = {}
    for path in paths:
        try:
            with open(path, encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise AutogenError(f"Cannot load data dictionary {path}: {e}") from e
        if not isinstance(raw, dict):
            raise AutogenError(f"Data dictionary {path} must be a mapping")
        for key, type_name in raw.items():
            try:
                dictionary[key] = DataType(str(type_name).lower())
            except ValueError:
                raise AutogenError(f"Unknown data type '{type_name}' for {key} in {Path(path).name}")
    return dictionary


class AutogenExtractor(BaseLabelExtractor):
    """Generates a field per leaf element of a label, typed by the job's data dictionary."""

    def extract(self, label_file: LabelFile, parsed: ParsedLabel, record: MetadataRecord, job: Job) -> None:
        """
        Add autogenerated fields to the record.

        Args:
            label_file: Label file being processed
            parsed: Parsed label
            record: Record to add the fields to
            job: Harvest job parameters

        Raises:
            AutogenError: dictionary cannot be loaded or a value does not match its type
            FieldConflictError: a generated key was already set
        """
        dictionary = load_dictionary(tuple(job.autogen.dictionary_files))
        excluded = set(job.autogen.exclude_classes)

        generated: Dict[str, List[Any]] = {}
        for parent, element in self._leaves(parsed.root, excluded):
            key = f"{parsed.qualified_name(parent.tag)}/{parsed.qualified_name(element.tag)}"
            value = element.text.strip()
            data_type = dictionary.get(key, DataType.STRING)
            try:
                converted = convert_value(value, data_type)
            except ValueError as e:
                raise AutogenError(f"{label_file.path}: {key}: {e}") from e
            generated.setdefault(key, []).append(converted)

        record.add_fields(generated)

        if self.debug:
            self.logger.debug(f"Generated {len(generated)} fields for {label_file.filename}")

    def _leaves(self, element: ET.Element, excluded: set):
        """Yield (parent, leaf) pairs with non-blank text, skipping excluded classes."""
        for child in element:
            if local_name(child.tag) in excluded:
                continue
            if len(child):
                yield from self._leaves(child, excluded)
            elif child.text and child.text.strip():
                yield element, child

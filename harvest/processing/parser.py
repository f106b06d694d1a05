import asyncio
import io
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from harvest.errors import LabelParseError
from harvest.model.label import LabelFile, ParsedLabel, local_name
from harvest.utils import read_file


def parse_label(data: bytes) -> ParsedLabel:
    """Parse raw label bytes, keeping the namespace prefixes declared in the document."""
    namespaces = {}
    root = None
    try:
        for event, item in ET.iterparse(io.BytesIO(data), events=("start-ns", "start")):
            if event == "start-ns":
                prefix, uri = item
                namespaces.setdefault(prefix, uri)
            elif root is None:
                root = item
    except ET.ParseError as e:
        raise LabelParseError(f"Invalid XML: {e}") from e

    if root is None:
        raise LabelParseError("Empty XML document")
    return ParsedLabel(root=root, namespaces=namespaces)


async def read_label(label_file: LabelFile) -> ParsedLabel:
    data = await read_file(label_file.path)
    try:
        return await asyncio.to_thread(parse_label, data)
    except LabelParseError as e:
        raise LabelParseError(f"{label_file.path}: {e}") from e


def peek_root_name(path: Path) -> Optional[str]:
    """
    Local name of a label's root element, reading only up to its start tag.

    Returns None for unreadable or malformed files; the full parse reports those.
    """
    try:
        with open(path, "rb") as f:
            for _, element in ET.iterparse(f, events=("start",)):
                return local_name(element.tag)
    except (OSError, ET.ParseError):
        return None
    return None

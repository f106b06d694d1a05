"""
Collection inventory tables.

A collection label names its inventory in `File_Area_Inventory/File/file_name`.
The inventory is a delimited table with two fields per record, the member
status (`P` primary, `S` secondary) and the member's LID or LIDVID.
"""

import csv
import io
from pathlib import Path
from typing import Dict, List

from harvest.errors import InventoryError
from harvest.model.label import InventoryEntry
from harvest.utils import read_file


def parse_inventory(text: str, delimiter: str = ",") -> List[InventoryEntry]:
    """Parse inventory records in file order. Blank records are ignored."""
    entries = []
    for line_number, row in enumerate(csv.reader(io.StringIO(text), delimiter=delimiter), start=1):
        cells = [cell.strip() for cell in row]
        if not any(cells):
            continue
        if len(cells) < 2 or not cells[0] or not cells[1]:
            raise InventoryError(f"Line {line_number}: expected member status and reference, got {row}")
        entries.append(InventoryEntry(member_status=cells[0], reference=cells[1]))
    return entries


async def read_inventory(path: Path, delimiter: str = ",") -> List[InventoryEntry]:
    try:
        data = await read_file(path)
    except OSError as e:
        raise InventoryError(f"Cannot read inventory {path}: {e}") from e

    try:
        return parse_inventory(data.decode("utf-8-sig"), delimiter)
    except UnicodeDecodeError as e:
        raise InventoryError(f"{path}: not a text inventory: {e}") from e
    except InventoryError as e:
        raise InventoryError(f"{path}: {e}") from e


def index_labels(directory: Path) -> Dict[str, Path]:
    """Map lower-cased label file stems under `directory` (recursive) to their paths."""
    index = {}
    for path in sorted(directory.rglob("*.xml")):
        index.setdefault(path.stem.lower(), path)
    return index

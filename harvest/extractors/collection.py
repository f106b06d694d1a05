from typing import Set

from harvest.errors import InventoryError
from harvest.extractors.base_extractor import BaseLabelExtractor
from harvest.model.label import ParsedLabel

INVENTORY_AREA = ".//{*}File_Area_Inventory"

# PDS4 field_delimiter values
FIELD_DELIMITERS = {
    "comma": ",",
    "horizontal tab": "\t",
    "semicolon": ";",
    "vertical bar": "|",
}


class CollectionMetadataExtractor(BaseLabelExtractor):
    """Reads the inventory tables of a collection label."""

    def extract_inventory_file_names(self, parsed: ParsedLabel) -> Set[str]:
        """Unique `file_name` values of `File_Area_Inventory/File`; empty when there is no inventory."""
        return set(self._all_text(parsed, f"{INVENTORY_AREA}/{{*}}File/{{*}}file_name"))

    def extract_field_delimiter(self, parsed: ParsedLabel, file_name: str) -> str:
        """
        Field delimiter of the inventory table stored in `file_name`.

        Defaults to a comma when the inventory does not declare one.

        Raises:
            InventoryError: the declared delimiter is not a PDS4 field delimiter
        """
        for area in parsed.findall(INVENTORY_AREA):
            file_element = area.find("{*}File")
            if file_element is None or self._child_text(file_element, "file_name") != file_name:
                continue
            inventory = area.find("{*}Inventory")
            value = self._child_text(inventory, "field_delimiter") if inventory is not None else None
            if not value:
                break
            try:
                return FIELD_DELIMITERS[self._normalize_whitespace(value).lower()]
            except KeyError:
                raise InventoryError(f"Unsupported field delimiter '{value}' for inventory {file_name}")
        return ","

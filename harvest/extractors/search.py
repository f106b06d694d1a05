from typing import Any, Dict

from harvest.extractors.base_extractor import BaseLabelExtractor
from harvest.model.label import ParsedLabel

OBSERVATION_AREA = ".//{*}Observation_Area"
CITATION = "{*}Identification_Area/{*}Citation_Information"

# search field -> (path, multi-valued)
SEARCH_FIELDS = {
    "search:investigation_name": (f"{OBSERVATION_AREA}/{{*}}Investigation_Area/{{*}}name", True),
    "search:target_name": (f"{OBSERVATION_AREA}/{{*}}Target_Identification/{{*}}name", True),
    "search:start_date_time": (f"{OBSERVATION_AREA}/{{*}}Time_Coordinates/{{*}}start_date_time", False),
    "search:stop_date_time": (f"{OBSERVATION_AREA}/{{*}}Time_Coordinates/{{*}}stop_date_time", False),
    "search:processing_level": (f"{OBSERVATION_AREA}/{{*}}Primary_Result_Summary/{{*}}processing_level", True),
    "search:purpose": (f"{OBSERVATION_AREA}/{{*}}Primary_Result_Summary/{{*}}purpose", True),
    "search:discipline_name": (f"{OBSERVATION_AREA}/{{*}}Primary_Result_Summary/{{*}}Science_Facets/{{*}}discipline_name", True),
    "search:keyword": (f"{CITATION}/{{*}}keyword", True),
    "search:description": (f"{CITATION}/{{*}}description", False),
}

# Observing_System_Component type -> search field
COMPONENT_FIELDS = {
    "instrument": "search:instrument_name",
    "host": "search:instrument_host_name",
    "spacecraft": "search:instrument_host_name",
    "telescope": "search:telescope_name",
    "facility": "search:facility_name",
}


class SearchMetadataExtractor(BaseLabelExtractor):
    """Projects the fields used by registry search out of a label."""

    def extract(self, parsed: ParsedLabel, search_fields: Dict[str, Any]) -> None:
        for key, (path, multi) in SEARCH_FIELDS.items():
            values = self._all_text(parsed, path)
            if not values:
                continue
            if multi:
                search_fields[key] = values
            else:
                search_fields[key] = self._normalize_whitespace(values[0])

        for component in parsed.root.iterfind(f"{OBSERVATION_AREA}/{{*}}Observing_System/{{*}}Observing_System_Component"):
            name = self._child_text(component, "name")
            component_type = (self._child_text(component, "type") or "").lower()
            key = COMPONENT_FIELDS.get(component_type)
            if not name or not key:
                continue
            names = search_fields.setdefault(key, [])
            if name not in names:
                names.append(name)

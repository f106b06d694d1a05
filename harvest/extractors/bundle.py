from typing import List

from harvest.errors import ExtractionError
from harvest.extractors.base_extractor import BaseLabelExtractor
from harvest.model.label import BundleMemberEntry, InternalReference, ParsedLabel

DEFAULT_MEMBER_REFERENCE_TYPE = "bundle_has_member_collection"


class BundleMetadataExtractor(BaseLabelExtractor):
    """Reads the member entries of a bundle label."""

    def extract_bundle_member_entries(self, parsed: ParsedLabel) -> List[BundleMemberEntry]:
        entries = []
        for element in parsed.root.iterfind(".//{*}Bundle_Member_Entry"):
            entries.append(
                BundleMemberEntry(
                    lid_reference=self._child_text(element, "lid_reference"),
                    lidvid_reference=self._child_text(element, "lidvid_reference"),
                    member_status=self._child_text(element, "member_status"),
                    reference_type=self._child_text(element, "reference_type"),
                )
            )
        return entries

    def add_refs(self, refs: List[InternalReference], entry: BundleMemberEntry) -> None:
        """
        Append exactly one reference for a bundle member entry.

        Raises:
            ExtractionError: the entry has neither lid_reference nor lidvid_reference
        """
        if not entry.target:
            raise ExtractionError("Bundle_Member_Entry has no lid_reference or lidvid_reference")
        refs.append(
            InternalReference(
                target=entry.target,
                reference_type=entry.reference_type or DEFAULT_MEMBER_REFERENCE_TYPE,
                source="bundle_member",
            )
        )

from typing import List

from harvest.extractors.base_extractor import BaseLabelExtractor
from harvest.model.label import InternalReference, ParsedLabel


class InternalReferenceExtractor(BaseLabelExtractor):
    """Collects every `Internal_Reference` of a label."""

    def extract(self, parsed: ParsedLabel) -> List[InternalReference]:
        refs = []
        for element in parsed.root.iterfind(".//{*}Internal_Reference"):
            target = self._child_text(element, "lidvid_reference") or self._child_text(element, "lid_reference")
            if not target:
                self.logger.debug("Skipping Internal_Reference without lid or lidvid reference")
                continue
            ref_type = self._child_text(element, "reference_type") or ""
            refs.append(InternalReference(target=target, reference_type=ref_type))
        return refs

    def add_refs(self, refs: List[InternalReference], parsed: ParsedLabel) -> None:
        """Append the label's references after any already in `refs`."""
        refs.extend(self.extract(parsed))

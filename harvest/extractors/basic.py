from harvest.config import Job
from harvest.errors import MissingIdentifierError
from harvest.extractors.base_extractor import BaseLabelExtractor
from harvest.model.label import LabelFile, MetadataRecord, ParsedLabel

IDENTIFICATION_AREA = "{*}Identification_Area"


class BasicMetadataExtractor(BaseLabelExtractor):
    """Seeds a record with the product's identity fields."""

    def extract(self, label_file: LabelFile, parsed: ParsedLabel, job: Job) -> MetadataRecord:
        """
        Create the record for a label.

        Args:
            label_file: Label file being processed
            parsed: Parsed label
            job: Harvest job parameters

        Returns:
            New MetadataRecord with lid, vid, lidvid, title and product_class set

        Raises:
            MissingIdentifierError: the label has no logical_identifier or version_id
        """
        lid = parsed.find_text(f"{IDENTIFICATION_AREA}/{{*}}logical_identifier")
        if not lid:
            raise MissingIdentifierError(f"Missing logical identifier: {label_file.path}")

        vid = parsed.find_text(f"{IDENTIFICATION_AREA}/{{*}}version_id")
        if not vid:
            raise MissingIdentifierError(f"Missing version id: {label_file.path}")

        record = MetadataRecord(label_file=label_file)
        record.add_field("lid", lid)
        record.add_field("vid", vid)
        record.add_field("lidvid", f"{lid}::{vid}")
        record.add_field("product_class", parsed.root_name)

        title = parsed.find_text(f"{IDENTIFICATION_AREA}/{{*}}title")
        if title:
            record.add_field("title", self._normalize_whitespace(title))

        if job.node_name:
            record.add_field("ops:Harvest_Info/ops:node_name", job.node_name)

        self._log_fields(record, record.fields)
        return record

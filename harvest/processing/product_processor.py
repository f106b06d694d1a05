"""Per-file metadata pipeline for PDS4 labels."""

import asyncio
from typing import List, Optional

from harvest.config import Job
from harvest.extractors import (
    AutogenExtractor,
    BasicMetadataExtractor,
    BundleMetadataExtractor,
    CollectionMetadataExtractor,
    FileMetadataExtractor,
    InternalReferenceExtractor,
    SearchMetadataExtractor,
)
from harvest.logging import get_logger
from harvest.model.enums import ProcessorStatus, ProductVariant
from harvest.model.label import (
    InventoryEntry,
    LabelFile,
    MetadataRecord,
    ParsedLabel,
    ProcessingResult,
    WorkItem,
)
from harvest.processing.classifier import classify
from harvest.processing.gatekeeper import accept
from harvest.processing.inventory import index_labels, read_inventory
from harvest.processing.parser import read_label
from harvest.writers.registry_writer import RegistryWriter

COLLECTION_LIDVID_FIELD = "ops:collection_lidvid"
INVENTORY_MEMBER_FIELD = "ops:Collection_Inventory/ops:member_reference"
INVENTORY_STATUS_FIELD = "ops:Collection_Inventory/ops:member_status"


class ProductProcessor:
    """
    Extracts metadata from one label file and dispatches it to the registry writer.

    Collection labels do not recurse: the member label files listed in their
    inventory tables are returned as work items for the caller to schedule.
    """

    def __init__(self, writer: RegistryWriter, debug: bool = False):
        """
        Args:
            writer: Registry sink receiving finished records.
            debug: Enable debug logging in extractors.
        """
        self.writer = writer
        self.logger = get_logger(self.__class__.__name__)

        # Bundle and Collection extractors
        self.bundle_extractor = BundleMetadataExtractor(debug=debug)
        self.collection_extractor = CollectionMetadataExtractor(debug=debug)

        # Common extractors
        self.basic_extractor = BasicMetadataExtractor(debug=debug)
        self.ref_extractor = InternalReferenceExtractor(debug=debug)
        self.autogen_extractor = AutogenExtractor(debug=debug)
        self.search_extractor = SearchMetadataExtractor(debug=debug)
        self.file_data_extractor = FileMetadataExtractor(debug=debug)

    async def process(self, item: WorkItem, job: Job) -> ProcessingResult:
        """
        Process one scheduled work item.

        Errors from stat, parsing, extraction or writing propagate to the caller.
        """
        label_file = await asyncio.to_thread(LabelFile.from_path, item.path)
        return await self.process_file(label_file, job, owner_lidvid=item.owner_lidvid)

    async def process_file(
        self,
        label_file: LabelFile,
        job: Job,
        owner_lidvid: Optional[str] = None,
    ) -> ProcessingResult:
        """
        Process one label file.

        Args:
            label_file: PDS label XML file
            job: Harvest job configuration parameters
            owner_lidvid: LIDVID of the collection whose inventory named this file

        Returns:
            SKIPPED result for oversized files, otherwise SUCCESS with the
            work items discovered in a collection inventory
        """
        # Skip very large files
        if not accept(label_file):
            return ProcessingResult(status=ProcessorStatus.SKIPPED, path=label_file.path)

        parsed = await read_label(label_file)
        return await self.process_metadata(label_file, parsed, job, owner_lidvid)

    async def process_metadata(
        self,
        label_file: LabelFile,
        parsed: ParsedLabel,
        job: Job,
        owner_lidvid: Optional[str] = None,
    ) -> ProcessingResult:
        """
        Run the extraction stages on a parsed label, in a fixed order.

        Args:
            label_file: PDS label file
            parsed: Parsed XML of the label file
            job: Harvest job configuration parameters
            owner_lidvid: LIDVID of the owning collection, if any

        Returns:
            SUCCESS result carrying the record's LIDVID and any discovered work items
        """
        # Extract basic metadata
        record = self.basic_extractor.extract(label_file, parsed, job)
        if owner_lidvid:
            record.add_field(COLLECTION_LIDVID_FIELD, owner_lidvid)

        self.logger.info(f"Processing {label_file.path}")

        work_items: List[WorkItem] = []
        variant = classify(parsed)

        if variant == ProductVariant.COLLECTION:
            work_items = await self._process_inventory_files(label_file, parsed, record)
        elif variant == ProductVariant.BUNDLE:
            self._add_collection_refs(record, parsed)
        elif variant == ProductVariant.SUPPLEMENTAL:
            # Supplemental products are recognized but have no extra stage yet
            pass
        elif variant == ProductVariant.OTHER:
            pass
        else:
            raise ValueError(f"Unhandled product variant: {variant}")

        # Internal references
        self.ref_extractor.add_refs(record.internal_refs, parsed)

        # Extract fields autogenerated from data dictionary
        self.autogen_extractor.extract(label_file, parsed, record, job)

        # Extract search fields
        self.search_extractor.extract(parsed, record.search_fields)

        # Extract file data
        await self.file_data_extractor.extract(label_file, parsed, record, job)

        await self.writer.write(record, job.job_id)

        return ProcessingResult(
            status=ProcessorStatus.SUCCESS,
            path=label_file.path,
            lidvid=record.lidvid,
            work_items=work_items,
        )

    async def _process_inventory_files(
        self,
        collection_file: LabelFile,
        parsed: ParsedLabel,
        record: MetadataRecord,
    ) -> List[WorkItem]:
        """
        Read the collection's inventory tables and resolve their primary members to label files.

        Every member reference and status is recorded on the collection. Primary
        members are looked up by product id among the label files under the
        collection's directory; secondary members belong to other collections.

        Args:
            collection_file: PDS4 collection label file
            parsed: Parsed PDS4 collection label
            record: Collection record; its LIDVID becomes the owner of each work item

        Returns:
            One work item per member label file found, in inventory order

        Raises:
            InventoryError: an inventory table is missing or malformed
        """
        file_names = self.collection_extractor.extract_inventory_file_names(parsed)
        if not file_names:
            return []

        entries: List[InventoryEntry] = []
        for file_name in sorted(file_names):
            delimiter = self.collection_extractor.extract_field_delimiter(parsed, file_name)
            entries.extend(await read_inventory(collection_file.directory / file_name, delimiter))

        if not entries:
            return []

        record.add_field(INVENTORY_MEMBER_FIELD, [entry.reference for entry in entries])
        record.add_field(INVENTORY_STATUS_FIELD, [entry.member_status for entry in entries])

        labels = await asyncio.to_thread(index_labels, collection_file.directory)
        work_items: List[WorkItem] = []
        seen = set()
        for entry in entries:
            if not entry.is_primary:
                continue
            path = labels.get(entry.product_id.lower())
            if path is None:
                self.logger.warning(f"No label file found for {entry.reference} in inventory of {record.lidvid}")
                continue
            if path in seen:
                continue
            seen.add(path)
            work_items.append(WorkItem(path=path, owner_lidvid=record.lidvid))

        self.logger.debug(f"Collection {record.lidvid} lists {len(entries)} members, {len(work_items)} label files found")
        return work_items

    def _add_collection_refs(self, record: MetadataRecord, parsed: ParsedLabel) -> None:
        entries = self.bundle_extractor.extract_bundle_member_entries(parsed)

        for entry in entries:
            self.bundle_extractor.add_refs(record.internal_refs, entry)

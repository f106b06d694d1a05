from harvest.model.enums import DataType, LogLevel, ProcessorStatus, ProductVariant
from harvest.model.label import (
    BundleMemberEntry,
    FileMetadata,
    InternalReference,
    InventoryEntry,
    LabelFile,
    MetadataRecord,
    ParsedLabel,
    ProcessingResult,
    WorkItem,
)

__all__ = [
    "BundleMemberEntry",
    "DataType",
    "FileMetadata",
    "InternalReference",
    "InventoryEntry",
    "LabelFile",
    "LogLevel",
    "MetadataRecord",
    "ParsedLabel",
    "ProcessingResult",
    "ProcessorStatus",
    "ProductVariant",
    "WorkItem",
]

from harvest.extractors.autogen import AutogenExtractor
from harvest.extractors.basic import BasicMetadataExtractor
from harvest.extractors.bundle import BundleMetadataExtractor
from harvest.extractors.collection import CollectionMetadataExtractor
from harvest.extractors.file_metadata import FileMetadataExtractor
from harvest.extractors.references import InternalReferenceExtractor
from harvest.extractors.search import SearchMetadataExtractor

__all__ = [
    "AutogenExtractor",
    "BasicMetadataExtractor",
    "BundleMetadataExtractor",
    "CollectionMetadataExtractor",
    "FileMetadataExtractor",
    "InternalReferenceExtractor",
    "SearchMetadataExtractor",
]

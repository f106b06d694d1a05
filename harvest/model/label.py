"""Label files, parsed labels and the metadata records built from them."""

import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from harvest.errors import FieldConflictError
from harvest.model.enums import ProcessorStatus


def local_name(tag: str) -> str:
    """Strip the `{namespace}` part of an ElementTree tag."""
    return tag.rsplit("}", 1)[-1]


def namespace_uri(tag: str) -> str:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return ""


@dataclass(frozen=True)
class LabelFile:
    """A label file on disk and its size in bytes."""

    path: Path
    size: int

    @classmethod
    def from_path(cls, path) -> "LabelFile":
        path = Path(path).absolute()
        return cls(path=path, size=os.stat(path).st_size)

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def directory(self) -> Path:
        return self.path.parent

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class ParsedLabel:
    """
    Parsed XML tree of a label file.

    Tags keep their `{uri}` qualifier; `namespaces` maps the prefixes declared
    in the document to their URIs so extractors can build `prefix:Name` keys.
    """

    root: ET.Element
    namespaces: Dict[str, str] = field(default_factory=dict)

    @property
    def root_name(self) -> str:
        return local_name(self.root.tag)

    def prefix_for(self, tag: str) -> str:
        uri = namespace_uri(tag)
        for prefix, ns_uri in self.namespaces.items():
            if ns_uri == uri and prefix:
                return prefix
        return "pds"

    def qualified_name(self, tag: str) -> str:
        return f"{self.prefix_for(tag)}:{local_name(tag)}"

    def find(self, path: str) -> Optional[ET.Element]:
        return self.root.find(path)

    def findall(self, path: str) -> List[ET.Element]:
        return self.root.findall(path)

    def find_text(self, path: str) -> Optional[str]:
        """Stripped text of the first element matching `path`, or None if missing or blank."""
        element = self.root.find(path)
        if element is None or element.text is None:
            return None
        text = element.text.strip()
        return text or None


@dataclass(frozen=True)
class InternalReference:
    """A reference from the current product to another product."""

    target: str
    reference_type: str
    source: str = "label"

    @property
    def lid(self) -> str:
        return self.target.split("::", 1)[0]

    @property
    def is_lidvid(self) -> bool:
        return "::" in self.target

    @property
    def category(self) -> str:
        # bundle_has_collection -> collection, data_to_investigation -> investigation
        return self.reference_type.rsplit("_", 1)[-1] if self.reference_type else "other"

    def to_dict(self) -> Dict[str, str]:
        return {"target": self.target, "reference_type": self.reference_type, "source": self.source}


@dataclass(frozen=True)
class BundleMemberEntry:
    """A `Bundle_Member_Entry` of a bundle label."""

    lid_reference: Optional[str] = None
    lidvid_reference: Optional[str] = None
    member_status: Optional[str] = None
    reference_type: Optional[str] = None

    @property
    def target(self) -> Optional[str]:
        return self.lidvid_reference or self.lid_reference


@dataclass(frozen=True)
class InventoryEntry:
    """One row of a collection inventory table: member status and LID or LIDVID reference."""

    member_status: str
    reference: str

    @property
    def lid(self) -> str:
        return self.reference.split("::", 1)[0]

    @property
    def product_id(self) -> str:
        # urn:nasa:pds:insight_seis:data:obs_001 -> obs_001
        return self.lid.rsplit(":", 1)[-1]

    @property
    def is_primary(self) -> bool:
        return self.member_status.upper().startswith("P")


@dataclass(frozen=True)
class FileMetadata:
    """Information about a physical file (label or data file)."""

    file_name: str
    file_size: int
    creation_date_time: str
    mime_type: Optional[str] = None
    md5_checksum: Optional[str] = None
    file_ref: Optional[str] = None

    def to_fields(self, prefix: str = "ops:Label_File_Info") -> Dict[str, Any]:
        values = {
            "file_name": self.file_name,
            "file_size": self.file_size,
            "creation_date_time": self.creation_date_time,
            "mime_type": self.mime_type,
            "md5_checksum": self.md5_checksum,
            "file_ref": self.file_ref,
        }
        return {f"{prefix}/ops:{key}": value for key, value in values.items() if value is not None}


@dataclass
class MetadataRecord:
    """
    Accumulating output for one label file.

    Field keys are unique: a stage may add new keys but overwriting a key set
    by an earlier stage raises `FieldConflictError` unless `override=True`.
    """

    label_file: LabelFile
    fields: Dict[str, Any] = field(default_factory=dict)
    internal_refs: List[InternalReference] = field(default_factory=list)
    search_fields: Dict[str, Any] = field(default_factory=dict)
    file_metadata: Optional[FileMetadata] = None

    @property
    def lid(self) -> Optional[str]:
        return self.fields.get("lid")

    @property
    def vid(self) -> Optional[str]:
        return self.fields.get("vid")

    @property
    def lidvid(self) -> Optional[str]:
        return self.fields.get("lidvid")

    def add_field(self, key: str, value: Any, override: bool = False) -> None:
        if key in self.fields and not override:
            raise FieldConflictError(key)
        self.fields[key] = value

    def add_fields(self, values: Dict[str, Any], override: bool = False) -> None:
        for key, value in values.items():
            self.add_field(key, value, override=override)

    def get_field(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)

    def to_document(self) -> Dict[str, Any]:
        """Flatten the record into a registry document."""
        document = dict(self.fields)
        document.update(self.search_fields)
        if self.file_metadata:
            document.update(self.file_metadata.to_fields())

        for ref in self.internal_refs:
            lids = document.setdefault(f"ref_lid_{ref.category}", [])
            if ref.lid not in lids:
                lids.append(ref.lid)
            if ref.is_lidvid:
                lidvids = document.setdefault(f"ref_lidvid_{ref.category}", [])
                if ref.target not in lidvids:
                    lidvids.append(ref.target)
        document["ops:internal_references"] = [ref.to_dict() for ref in self.internal_refs]
        return document

    def __str__(self) -> str:
        return f"MetadataRecord({self.lidvid}, {self.label_file.filename})"


@dataclass(frozen=True)
class WorkItem:
    """
    A label file path scheduled for processing.

    `owner_lidvid` is set for files discovered through a collection inventory.
    The path is only stat-ed when the item's own pipeline runs.
    """

    path: Path
    owner_lidvid: Optional[str] = None


@dataclass
class ProcessingResult:
    """Outcome of one label file's pipeline."""

    status: ProcessorStatus
    path: Path
    lidvid: Optional[str] = None
    work_items: List[WorkItem] = field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == ProcessorStatus.SUCCESS

    @property
    def is_skipped(self) -> bool:
        return self.status == ProcessorStatus.SKIPPED

    @property
    def is_failed(self) -> bool:
        return self.status == ProcessorStatus.FAILED

"""Pytest configuration and fixtures for harvest tests."""

from pathlib import Path
from typing import List, Tuple

import pytest
from loguru import logger

from harvest.config import Job
from harvest.model.label import MetadataRecord
from harvest.processing.parser import parse_label
from harvest.processing.product_processor import ProductProcessor
from harvest.writers.registry_writer import RegistryWriter

PDS_NS = "http://pds.nasa.gov/pds4/pds/v1"


def build_label(
    root: str = "Product_Observational",
    lid: str = "urn:nasa:pds:test_bundle:data:obs_001",
    vid: str = "1.0",
    title: str = "Test Product",
    body: str = "",
) -> str:
    """Minimal PDS4 label with an Identification_Area and `body` appended after it."""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<{root} xmlns="{PDS_NS}">
  <Identification_Area>
    <logical_identifier>{lid}</logical_identifier>
    <version_id>{vid}</version_id>
    <title>{title}</title>
    <product_class>{root}</product_class>
  </Identification_Area>
  {body}
</{root}>
"""


def inventory_body(*file_names: str, delimiter: str = "Comma") -> str:
    return "\n".join(
        f"""<File_Area_Inventory>
              <File><file_name>{name}</file_name></File>
              <Inventory><field_delimiter>{delimiter}</field_delimiter></Inventory>
            </File_Area_Inventory>"""
        for name in file_names
    )


def bundle_body(*lid_refs: str) -> str:
    entries = "\n".join(
        f"""<Bundle_Member_Entry>
              <lid_reference>{lid}</lid_reference>
              <member_status>Primary</member_status>
              <reference_type>bundle_has_data_collection</reference_type>
            </Bundle_Member_Entry>"""
        for lid in lid_refs
    )
    return entries


def reference_body(*refs: Tuple[str, str]) -> str:
    items = "\n".join(
        f"""<Internal_Reference>
              <lidvid_reference>{target}</lidvid_reference>
              <reference_type>{ref_type}</reference_type>
            </Internal_Reference>"""
        for target, ref_type in refs
    )
    return f"<Reference_List>{items}</Reference_List>"


class RecordingWriter(RegistryWriter):
    """Registry writer keeping every record in memory."""

    def __init__(self):
        super().__init__()
        self.written: List[Tuple[MetadataRecord, str]] = []

    async def write(self, record: MetadataRecord, job_id: str) -> None:
        self.written.append((record, job_id))

    @property
    def records(self) -> List[MetadataRecord]:
        return [record for record, _ in self.written]

    def record_for(self, filename: str) -> MetadataRecord:
        return next(record for record in self.records if record.label_file.filename == filename)


@pytest.fixture
def label_xml():
    """Label builder: `label_xml(root=..., lid=..., body=...)`."""
    return build_label


@pytest.fixture
def parsed_label():
    """Parse a label string: `parsed_label(xml)`."""
    def _parse(xml: str):
        return parse_label(xml.encode("utf-8"))
    return _parse


@pytest.fixture
def write_label(tmp_path):
    """Write a label under tmp_path: `write_label("coll/label.xml", **build_label_kwargs)`."""
    def _write(relative_path: str, **kwargs) -> Path:
        path = tmp_path / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(build_label(**kwargs), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def write_inventory(tmp_path):
    """Write an inventory table: `write_inventory("coll/inventory.csv", ("P", "urn:...::1.0"), ...)`."""
    def _write(relative_path: str, *rows: Tuple[str, str], delimiter: str = ",") -> Path:
        path = tmp_path / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes("".join(f"{status}{delimiter}{reference}\r\n" for status, reference in rows).encode("utf-8"))
        return path
    return _write


@pytest.fixture
def job() -> Job:
    return Job(job_id="test-job", node_name="PDS_GEO")


@pytest.fixture
def writer() -> RecordingWriter:
    return RecordingWriter()


@pytest.fixture
def processor(writer) -> ProductProcessor:
    return ProductProcessor(writer)


@pytest.fixture
def log_messages():
    """Capture loguru records emitted during a test."""
    records = []
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(sink_id)


@pytest.fixture
def warnings_logged(log_messages):
    def _warnings():
        return [record["message"] for record in log_messages if record["level"].name == "WARNING"]
    return _warnings


@pytest.fixture(name="inventory_body")
def inventory_body_fixture():
    return inventory_body


@pytest.fixture(name="bundle_body")
def bundle_body_fixture():
    return bundle_body


@pytest.fixture(name="reference_body")
def reference_body_fixture():
    return reference_body

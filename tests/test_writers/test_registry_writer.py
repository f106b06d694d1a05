"""Tests for the JSONL registry writer."""

import asyncio
import json
from pathlib import Path

import pytest

from harvest.model.label import InternalReference, LabelFile, MetadataRecord
from harvest.writers.registry_writer import JsonlRegistryWriter


def make_record(index: int) -> MetadataRecord:
    record = MetadataRecord(label_file=LabelFile(path=Path(f"/data/obs/label_{index}.xml"), size=100))
    lid = f"urn:nasa:pds:b:data:obs_{index}"
    record.add_fields({"lid": lid, "vid": "1.0", "lidvid": f"{lid}::1.0"})
    record.internal_refs.append(InternalReference("urn:nasa:pds:b:data", "data_to_collection"))
    return record


class TestJsonlRegistryWriter:

    @pytest.mark.asyncio
    async def test_write_document(self, tmp_path):
        writer = JsonlRegistryWriter(tmp_path / "out")

        await writer.write(make_record(1), "job-1")

        lines = writer.output_file("job-1").read_text().splitlines()
        assert len(lines) == 1
        document = json.loads(lines[0])
        assert document["_id"] == "urn:nasa:pds:b:data:obs_1::1.0"
        assert document["_package_id"] == "job-1"
        assert document["ref_lid_collection"] == ["urn:nasa:pds:b:data"]
        assert document["ops:Harvest_Info/ops:harvest_date_time"].endswith("Z")
        assert writer.count == 1

    @pytest.mark.asyncio
    async def test_concurrent_writes(self, tmp_path):
        writer = JsonlRegistryWriter(tmp_path)

        await asyncio.gather(*(writer.write(make_record(i), "job-2") for i in range(20)))

        lines = writer.output_file("job-2").read_text().splitlines()
        ids = {json.loads(line)["_id"] for line in lines}
        assert len(lines) == 20
        assert len(ids) == 20

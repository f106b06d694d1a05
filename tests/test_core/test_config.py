"""Tests for configuration management."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from harvest.config import HarvestConfig, Inputs, Job, load_config
from harvest.errors import ConfigError
from harvest.model.enums import LogLevel


CONFIG_YAML = """
harvest:
  inputs:
    path: {data_dir}
  job:
    job_id: job-42
    node_name: PDS_ATM
    autogen:
      exclude_classes: [Reference_List]
    file_info:
      checksum: false
      file_ref:
        - prefix: /data
          replacement: https://pds.example.org/data
  registry:
    output_dir: {output_dir}
  workers: 2
  log_level: debug
"""


class TestLoadConfig:
    """Test cases for load_config."""

    def test_load_config(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(CONFIG_YAML.format(data_dir=tmp_path / "data", output_dir=tmp_path / "out"))

        cfg = load_config(config_path)

        assert cfg.job.job_id == "job-42"
        assert cfg.job.node_name == "PDS_ATM"
        assert cfg.job.autogen.exclude_classes == ("Reference_List",)
        assert cfg.job.file_info.checksum is False
        assert cfg.job.file_info.file_ref[0].replacement == "https://pds.example.org/data"
        assert cfg.registry.output_dir == str(tmp_path / "out")
        assert cfg.workers == 2
        assert cfg.log_level == LogLevel.DEBUG
        assert cfg.fail_fast is False

    def test_missing_harvest_section(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("pipeline:\n  inputs: {}\n")

        with pytest.raises(ConfigError, match="no 'harvest' section"):
            load_config(config_path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_workers(self):
        with pytest.raises(ValidationError):
            HarvestConfig(inputs={"path": "."}, workers=0)

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            HarvestConfig(inputs={"path": "."}, log_level="loud")


class TestJob:
    """Test cases for the Job model."""

    def test_defaults(self):
        job = Job()

        assert job.job_id
        assert job.node_name is None
        assert "File_Area_Inventory" in job.autogen.exclude_classes
        assert job.file_info.checksum is True
        assert job.file_info.process_data_files is False

    def test_generated_ids_are_unique(self):
        assert Job().job_id != Job().job_id

    def test_job_is_read_only(self):
        job = Job(job_id="fixed")

        with pytest.raises(ValidationError):
            job.job_id = "changed"


class TestInputs:
    """Test cases for input file discovery."""

    def test_directory_is_searched_recursively(self, tmp_path):
        (tmp_path / "bundle" / "data").mkdir(parents=True)
        (tmp_path / "bundle" / "bundle.xml").write_text("<a/>")
        (tmp_path / "bundle" / "data" / "collection.xml").write_text("<a/>")
        (tmp_path / "bundle" / "data" / "inventory.csv").write_text("P,urn:x::1.0")

        files = Inputs(path=str(tmp_path / "bundle")).get_files()

        assert sorted(f.name for f in files) == ["bundle.xml", "collection.xml"]

    def test_exclude_patterns(self, tmp_path):
        (tmp_path / "keep.xml").write_text("<a/>")
        (tmp_path / "skip_me.xml").write_text("<a/>")

        files = Inputs(path=str(tmp_path), exclude=["skip_*"]).get_files()

        assert [f.name for f in files] == ["keep.xml"]

    def test_single_file_and_list(self, tmp_path):
        first = tmp_path / "first.xml"
        second = tmp_path / "second.xml"
        first.write_text("<a/>")
        second.write_text("<a/>")

        files = Inputs(path=[str(first), str(second), str(tmp_path / "missing.xml")]).get_files()

        assert files == [Path(first), Path(second)]

import asyncio
import mimetypes
import os
from pathlib import Path
from typing import List

from harvest.config import Job
from harvest.errors import ExtractionError
from harvest.extractors.base_extractor import BaseLabelExtractor
from harvest.model.label import FileMetadata, LabelFile, MetadataRecord, ParsedLabel, local_name
from harvest.utils import md5_checksum, to_iso_utc

DATA_FILE_PREFIX = "ops:Data_File_Info"


class FileMetadataExtractor(BaseLabelExtractor):
    """Describes the label file, and optionally its data files, on disk."""

    async def extract(self, label_file: LabelFile, parsed: ParsedLabel, record: MetadataRecord, job: Job) -> None:
        """
        Attach file-level metadata to `record`.

        Args:
            label_file: Label file being processed
            parsed: Parsed label, used to find data file names
            record: Record to update
            job: Harvest job parameters

        Raises:
            ExtractionError: a file cannot be read
        """
        record.file_metadata = await self.describe_file(label_file.path, job)

        if not job.file_info.process_data_files:
            return

        data_fields = {}
        for file_name in self.data_file_names(parsed):
            info = await self.describe_file(label_file.directory / file_name, job)
            for key, value in info.to_fields(DATA_FILE_PREFIX).items():
                data_fields.setdefault(key, []).append(value)
        record.add_fields(data_fields)

    async def describe_file(self, path: Path, job: Job) -> FileMetadata:
        path = Path(path).absolute()
        try:
            stat = await asyncio.to_thread(os.stat, path)
            checksum = await md5_checksum(path) if job.file_info.checksum else None
        except OSError as e:
            raise ExtractionError(f"Cannot read file {path}: {e}") from e

        mime_type, _ = mimetypes.guess_type(path.name)
        return FileMetadata(
            file_name=path.name,
            file_size=stat.st_size,
            creation_date_time=to_iso_utc(stat.st_mtime),
            mime_type=mime_type,
            md5_checksum=checksum,
            file_ref=self.file_ref(path, job),
        )

    @staticmethod
    def file_ref(path: Path, job: Job) -> str:
        """Apply the first matching prefix replacement rule to the file path."""
        file_path = str(path)
        for rule in job.file_info.file_ref:
            if file_path.startswith(rule.prefix):
                return rule.replacement + file_path[len(rule.prefix):]
        return file_path

    @staticmethod
    def data_file_names(parsed: ParsedLabel) -> List[str]:
        names = []
        for area in parsed.root:
            if not local_name(area.tag).startswith("File_Area"):
                continue
            for element in area.iterfind("{*}File/{*}file_name"):
                name = (element.text or "").strip()
                if name and name not in names:
                    names.append(name)
        return names

import asyncio
import json
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

import aiofiles

from harvest.errors import RegistryWriteError
from harvest.logging import get_logger
from harvest.model.label import MetadataRecord


class RegistryWriter(ABC):
    """Sink for finished metadata records."""

    def __init__(self, name: Optional[str] = None):
        self.logger = get_logger(name or self.__class__.__name__)

    @abstractmethod
    async def write(self, record: MetadataRecord, job_id: str) -> None:
        """Write one record. Raises RegistryWriteError on failure."""
        pass

    async def close(self) -> None:
        pass

    @staticmethod
    def build_document(record: MetadataRecord, job_id: str) -> Dict[str, Any]:
        document = record.to_document()
        document["_id"] = record.lidvid
        document["_package_id"] = job_id
        document["ops:Harvest_Info/ops:harvest_date_time"] = (
            datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
        )
        return document


class JsonlRegistryWriter(RegistryWriter):
    """
    Appends registry documents to `<output_dir>/<job_id>.jsonl`.

    Writes are serialized with a lock, so concurrent workers of one job can share the writer.
    """

    def __init__(self, output_dir: Union[str, Path] = "./output"):
        super().__init__()
        self.output_dir = Path(output_dir)
        self._lock = asyncio.Lock()
        self.count = 0

    def output_file(self, job_id: str) -> Path:
        return self.output_dir / f"{job_id}.jsonl"

    async def write(self, record: MetadataRecord, job_id: str) -> None:
        document = self.build_document(record, job_id)
        output_file = self.output_file(job_id)

        async with self._lock:
            try:
                if not self.output_dir.exists():
                    self.logger.info(f"{self.output_dir} does not exist. creating...")
                    self.output_dir.mkdir(parents=True, exist_ok=True)
                async with aiofiles.open(output_file, "a", encoding="utf-8") as f:
                    await f.write(json.dumps(document, ensure_ascii=False, default=str))
                    await f.write("\n")
            except OSError as e:
                raise RegistryWriteError(f"Failed to write {record.lidvid} to {output_file}: {e}") from e
            self.count += 1

        self.logger.debug(f"Wrote {record.lidvid} to {output_file}")

import fnmatch
import uuid
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from harvest.errors import ConfigError
from harvest.model.enums import LogLevel


class Inputs(BaseModel):
    path: Union[str, list[str]]
    include: list[str] = ["*.xml"]
    exclude: list[str] = []

    def matches(self, file_path: Path) -> bool:
        name = file_path.name
        if self.include and not any(fnmatch.fnmatch(name, pattern) for pattern in self.include):
            return False
        return not any(fnmatch.fnmatch(name, pattern) for pattern in self.exclude)

    def get_files(self) -> list[Path]:
        paths = [self.path] if isinstance(self.path, str) else self.path
        files = []

        for p in paths:
            p = Path(p)

            if p.is_file():
                files.append(p)
            elif p.is_dir():
                files.extend(sorted(f for f in p.rglob("*") if f.is_file() and self.matches(f))) # recursive search across multiple levels
        return files


class AutogenConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    exclude_classes: tuple[str, ...] = ("File_Area_Inventory", "Reference_List")
    dictionary_files: tuple[str, ...] = ()


class FileRefRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    prefix: str
    replacement: str


class FileInfoConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    checksum: bool = True
    process_data_files: bool = False
    file_ref: tuple[FileRefRule, ...] = ()


class Job(BaseModel):
    """Read-only parameters shared by every label file of one harvest run."""

    model_config = ConfigDict(frozen=True)

    job_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    node_name: Optional[str] = None
    autogen: AutogenConfig = Field(default_factory=AutogenConfig)
    file_info: FileInfoConfig = Field(default_factory=FileInfoConfig)


class RegistryConfig(BaseModel):
    output_dir: str = "./output"


class HarvestConfig(BaseModel):
    inputs: Inputs
    job: Job = Field(default_factory=Job)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    workers: int = Field(default=4, gt=0, description="Number of concurrent label workers")
    fail_fast: bool = Field(default=False, description="Stop the run at the first failed label")
    log_level: LogLevel = LogLevel.INFO
    log_dir: Optional[str] = "logs"

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v):
        if isinstance(v, str):
            try:
                return LogLevel(v.upper())
            except ValueError:
                raise ValueError(f"Invalid log level: {v}")
        return v


def load_config(path: Union[str, Path]) -> HarvestConfig:
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    if not isinstance(raw, dict) or "harvest" not in raw:
        raise ConfigError(f"Config {path} has no 'harvest' section")
    return HarvestConfig(**raw["harvest"])  # unpack

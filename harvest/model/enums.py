"""Core enums for the harvest pipeline."""

from enum import Enum


class ProcessorStatus(Enum):
    """Status of one label file's pipeline."""
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


class ProductVariant(Enum):
    """Processing variant selected from a label's root element."""
    COLLECTION = "Product_Collection"
    BUNDLE = "Product_Bundle"
    SUPPLEMENTAL = "Product_Metadata_Supplemental"
    OTHER = "other"


class DataType(Enum):
    """Data dictionary value types used by autogenerated fields."""
    STRING = "string"
    DATE = "date"
    INTEGER = "integer"
    REAL = "real"
    BOOLEAN = "boolean"


class LogLevel(Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

"""Exceptions raised while harvesting label metadata."""


class HarvestError(Exception):
    """Base class for all harvest failures."""


class ConfigError(HarvestError):
    """Configuration file is missing, unreadable or malformed."""


class LabelParseError(HarvestError):
    """A label file could not be parsed as XML."""


class ExtractionError(HarvestError):
    """An extraction stage failed for the current label."""


class MissingIdentifierError(ExtractionError):
    """The label has no logical identifier."""


class AutogenError(ExtractionError):
    """A field value does not match its data dictionary type."""


class InventoryError(ExtractionError):
    """A collection inventory table is missing or malformed."""


class FieldConflictError(ExtractionError):
    """A stage tried to overwrite a field set by an earlier stage."""

    def __init__(self, key: str):
        super().__init__(f"Field already set: {key}")
        self.key = key


class RegistryWriteError(HarvestError):
    """The registry sink rejected a record."""

from harvest.logging import get_logger
from harvest.model.label import LabelFile

# Skip files bigger than 10MB
MAX_LABEL_FILE_SIZE = 10_000_000

logger = get_logger("gatekeeper")


def accept(label_file: LabelFile) -> bool:
    """Return False for labels too large to parse safely."""
    if label_file.size > MAX_LABEL_FILE_SIZE:
        logger.warning(f"File is too big to parse: {label_file.path}")
        return False
    return True

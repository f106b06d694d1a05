from harvest.processing.classifier import classify, classify_root
from harvest.processing.gatekeeper import MAX_LABEL_FILE_SIZE, accept
from harvest.processing.inventory import index_labels, parse_inventory, read_inventory
from harvest.processing.parser import parse_label, peek_root_name, read_label
from harvest.processing.product_processor import ProductProcessor
from harvest.processing.runner import HarvestRunner, HarvestStats

__all__ = [
    "MAX_LABEL_FILE_SIZE",
    "HarvestRunner",
    "HarvestStats",
    "ProductProcessor",
    "accept",
    "classify",
    "classify_root",
    "index_labels",
    "parse_inventory",
    "parse_label",
    "peek_root_name",
    "read_inventory",
    "read_label",
]

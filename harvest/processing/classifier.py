from typing import Optional

from harvest.model.enums import ProductVariant
from harvest.model.label import ParsedLabel

_VARIANTS = {
    variant.value: variant
    for variant in ProductVariant
    if variant is not ProductVariant.OTHER
}


def classify_root(root_name: Optional[str]) -> ProductVariant:
    return _VARIANTS.get(root_name, ProductVariant.OTHER)


def classify(parsed: ParsedLabel) -> ProductVariant:
    """Select the processing variant from the label's root element name."""
    return classify_root(parsed.root_name)

"""Coarse flower-type guess from a petal count."""

from enum import Enum


class FlowerType(str, Enum):
    """Flower type labels."""

    TULIP_OR_LILY = "Tulip or Lily"
    ROSE_OR_APPLE_BLOSSOM = "Rose or Apple Blossom"
    DAISY_OR_SUNFLOWER = "Daisy or Sunflower"
    CHRYSANTHEMUM_OR_DAHLIA = "Chrysanthemum or Dahlia"
    UNKNOWN = "Unknown"


# First matching rule wins. The == 5 rule sits behind the 4-6 range and never matches.
FLOWER_TYPE_RULES = [
    (lambda count: 4 <= count <= 6, FlowerType.TULIP_OR_LILY),
    (lambda count: count == 5, FlowerType.ROSE_OR_APPLE_BLOSSOM),
    (lambda count: 8 <= count <= 15, FlowerType.DAISY_OR_SUNFLOWER),
    (lambda count: count >= 20, FlowerType.CHRYSANTHEMUM_OR_DAHLIA),
]


def classify_flower(petal_count: int) -> FlowerType:
    """Map a petal count to a flower type label."""
    for matches, flower_type in FLOWER_TYPE_RULES:
        if matches(petal_count):
            return flower_type
    return FlowerType.UNKNOWN

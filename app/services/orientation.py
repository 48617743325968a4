"""
Orientation classification for uploaded videos.
"""

from enum import Enum


class OrientationTag(str, Enum):
    """Coarse aspect-ratio bucket used as the storage key prefix."""

    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"
    OTHER = "other"


# Open intervals: values exactly on a bound fall through to OTHER.
LANDSCAPE_RATIO_RANGE = (1.75, 1.8)  # 16:9 ~ 1.778
PORTRAIT_RATIO_RANGE = (0.55, 0.57)  # 9:16 = 0.5625


def classify_orientation(width: int, height: int) -> OrientationTag:
    """Map a width/height pair to an orientation bucket. First match wins."""
    if height <= 0:
        return OrientationTag.OTHER

    ratio = width / height
    if LANDSCAPE_RATIO_RANGE[0] < ratio < LANDSCAPE_RATIO_RANGE[1]:
        return OrientationTag.LANDSCAPE
    if PORTRAIT_RATIO_RANGE[0] < ratio < PORTRAIT_RATIO_RANGE[1]:
        return OrientationTag.PORTRAIT
    return OrientationTag.OTHER

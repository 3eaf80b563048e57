import math
import logging
import config
from collections import namedtuple

logger = logging.getLogger(__name__)

NOT_CROP = 'not-crop'
HARVESTED = 'harvested'
FROST_EVENT_A = 'frost-event-A'
FROST_EVENT_B = 'frost-event-B'
UNAFFECTED = 'unaffected'
UNKNOWN = 'unknown'

FROST_CATEGORIES = (FROST_EVENT_A, FROST_EVENT_B)

# frostClass code -> category (only meaningful inside the corn mask)
FROST_CODES = {
    1: HARVESTED,
    2: FROST_EVENT_A,
    3: FROST_EVENT_B,
    4: UNAFFECTED,
}

Classification = namedtuple('Classification', ['category', 'color', 'label'])


def make_classification(category):
    color, label = config.CATEGORY_STYLES[category]
    return Classification(category=category, color=color, label=label)


def is_frost_event(category):
    return category in FROST_CATEGORIES


def _as_code(value):
    """Categorical raster value as int, or None for nodata / non-integer samples."""
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value != int(value):
        return None
    return int(value)


def classify_values(crop_value, frost_value):
    """
    Decision table over the two classification bands.

    cropMask != 2 -> not-crop (black), whatever the frost class.
    cropMask == 2 -> frost class 1..4, anything else is unknown (gray).
    A nodata cropMask sample is unknown as well.
    """
    crop = _as_code(crop_value)
    if crop is None:
        return make_classification(UNKNOWN)
    if crop != config.CORN_VALUE:
        return make_classification(NOT_CROP)

    category = FROST_CODES.get(_as_code(frost_value), UNKNOWN)
    return make_classification(category)


def classify(point, archive, raster_id=None, bands=None):
    """
    Samples the classification raster at `point` and applies the decision table.

    Archive failures propagate as ArchiveUnavailable.
    """
    raster_id = raster_id or config.CLASSIFICATION_ASSET
    bands = bands or config.CLASSIFICATION_BANDS
    crop_band, frost_band = bands

    values = archive.sample_raster(point, raster_id, bands) or {}
    classification = classify_values(values.get(crop_band), values.get(frost_band))

    logger.info("Point (%.4f, %.4f) classified as %s", point.lon, point.lat, classification.category)
    return classification

import math
import logging
import config
from collections import namedtuple

from modules.errors import MissingQualityBand
from modules.observations import with_channels

logger = logging.getLogger(__name__)

QualityFlags = namedtuple('QualityFlags', ['cloud', 'cirrus'])


def quality_flags(observation, qa_band=config.QA_BAND, cloud_bit=config.CLOUD_BIT, cirrus_bit=config.CIRRUS_BIT):
    """
    Decodes the cloud and cirrus flags from the bit-encoded QA band (QA60 for Sentinel-2).

    Raises:
        MissingQualityBand: the observation has no usable QA value (absent, NaN or non-numeric).
    """
    try:
        qa = float(observation.channels.get(qa_band))
    except (TypeError, ValueError):
        raise MissingQualityBand(observation.timestamp, qa_band)
    if not math.isfinite(qa):
        raise MissingQualityBand(observation.timestamp, qa_band)

    qa = int(qa)
    return QualityFlags(
        cloud=bool(qa & (1 << cloud_bit)),
        cirrus=bool(qa & (1 << cirrus_bit)),
    )


def is_usable(observation, qa_band=config.QA_BAND):
    """True iff neither the cloud nor the cirrus flag is set."""
    flags = quality_flags(observation, qa_band=qa_band)
    return not (flags.cloud or flags.cirrus)


def rescale(observation, scale=config.REFLECTANCE_SCALE, qa_band=config.QA_BAND):
    """Converts native integer reflectance to reflectance fraction. The QA band is left as is."""
    channels = {}
    for name, value in observation.channels.items():
        if name == qa_band or value is None:
            channels[name] = value
        else:
            channels[name] = value / scale
    return with_channels(observation, channels)


def cloudmask(observations, scale=config.REFLECTANCE_SCALE, qa_band=config.QA_BAND):
    """
    Drops cloud or cirrus contaminated observations and rescales the survivors.

    Observations without a QA band are skipped with a warning instead of
    aborting the whole series.
    """
    usable = []
    dropped = 0
    for obs in observations:
        try:
            keep = is_usable(obs, qa_band=qa_band)
        except MissingQualityBand as e:
            logger.warning("Skipping observation: %s", e)
            dropped += 1
            continue

        if keep:
            usable.append(rescale(obs, scale=scale, qa_band=qa_band))
        else:
            dropped += 1

    logger.debug("Cloud mask kept %d observations, dropped %d", len(usable), dropped)
    return usable

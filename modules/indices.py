import config
from modules.observations import with_channels


def normalized_difference(a, b):
    """
    (a - b) / (a + b), or None when either input is absent or a + b == 0.

    Not clamped: values outside [-1, 1] are returned as computed.
    """
    if a is None or b is None:
        return None
    total = a + b
    if total == 0:
        return None
    return (a - b) / total


# Calculates NDVI for Sentinel-2 as (NIR - Red) / (NIR + Red)
def ndvi(observation, nir_band=config.NIR_BAND, red_band=config.RED_BAND, channel=config.INDEX_CHANNEL):
    """
    Replaces the reflectance channels with the index channel.

    A degenerate index (zero denominator) is marked absent and the observation is kept.
    """
    value = normalized_difference(observation.channels.get(nir_band), observation.channels.get(red_band))
    return with_channels(observation, {channel: value})


def compute_index(observations, **kwargs):
    return [ndvi(obs, **kwargs) for obs in observations]

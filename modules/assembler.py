import logging
import config
from collections import namedtuple
from operator import attrgetter
from concurrent.futures import ThreadPoolExecutor

from modules.classifier import classify, is_frost_event
from modules.cloudmask import cloudmask
from modules.indices import compute_index
from modules.markers import event_markers
from modules.observations import ObservationSeries, with_channels

logger = logging.getLogger(__name__)

AssemblyResult = namedtuple('AssemblyResult', ['classification', 'series', 'channels'])


def select_channels(classification):
    """(marker, index) for frost-event points, (index,) for everything else."""
    if is_frost_event(classification.category):
        return (config.MARKER_CHANNEL, config.INDEX_CHANNEL)
    return (config.INDEX_CHANNEL,)


def normalize_schema(observations, channels):
    """
    Band alignment: every observation gets exactly `channels`, absent (None)
    where it has no value. The chart renderer needs one fixed schema per series.
    """
    return [
        with_channels(obs, {channel: obs.channels.get(channel) for channel in channels})
        for obs in observations
    ]


def assemble(point, study_window=None, archive=None, study_year=None):
    """
    Builds the classification and the NDVI series for one clicked point.

    Steps:
        1. Query the archive for observations in the study window.
        2. Drop cloud / cirrus contaminated observations and rescale the rest.
        3. Compute the index channel.
        4. Classify the point (issued concurrently with step 1).
        5. For frost events merge in the two synthetic marker observations.
        6. Stable sort by timestamp.

    Args:
        point (Point): Clicked location.
        study_window (tuple): (start, end) date strings. Defaults to config.STUDY_WINDOW.
        archive (ImageArchive): Archive service to read from.
        study_year (int): Year of the frost events. Defaults to config.STUDY_YEAR.

    Returns:
        AssemblyResult: (classification, series, channels).

    Raises:
        ArchiveUnavailable: either archive query failed. No partial series is returned.
    """
    if archive is None:
        raise ValueError("An image archive is required")
    study_window = study_window or config.STUDY_WINDOW

    with ThreadPoolExecutor(max_workers=config.ARCHIVE_WORKERS) as executor:
        classification_future = executor.submit(classify, point, archive)
        observations_future = executor.submit(archive.query, point, study_window)
        classification = classification_future.result()
        raw = observations_future.result()

    logger.info("Archive returned %d observations for (%.4f, %.4f)", len(raw), point.lon, point.lat)

    observations = compute_index(cloudmask(raw))
    channels = select_channels(classification)

    merged = normalize_schema(observations, channels)
    if is_frost_event(classification.category):
        markers = event_markers(classification.category, study_year=study_year)
        merged.extend(normalize_schema(markers, channels))

    # sorted() is stable: ties keep archive order, real before synthetic
    merged = sorted(merged, key=attrgetter('timestamp'))

    series = ObservationSeries(merged, channels)
    logger.info("Assembled %d observations, channels=%s, category=%s",
                len(series), ",".join(channels), classification.category)
    return AssemblyResult(classification=classification, series=series, channels=channels)

"""
Image archive service backed by Google Earth Engine.

The pipeline only depends on the ImageArchive interface:
    query(point, date_range)              -> list of raw Sentinel-2 Observations
    sample_raster(point, raster_id, bands) -> {band: value or None}
    scene_at(point, day)                  -> Scene or None
Map tile layers for the map page are exposed as well.
"""

import ee
import logging
import config
from collections import namedtuple

from utils import retrieve_sensor_data
from modules.errors import ArchiveUnavailable
from modules.observations import Observation, from_millis

logger = logging.getLogger(__name__)

Scene = namedtuple('Scene', ['date', 'image_id', 'rgb_url', 'false_color_url'])
TileLayer = namedtuple('TileLayer', ['name', 'url', 'shown'])


class ImageArchive(object):
    """Interface of the external image archive."""

    def query(self, point, date_range):
        raise NotImplementedError

    def sample_raster(self, point, raster_id, bands):
        raise NotImplementedError

    def scene_at(self, point, day):
        raise NotImplementedError


def rows_to_observations(rows, bands):
    """
    Converts a getRegion() table into Observations.

    The first row is the header: ['id', 'longitude', 'latitude', 'time', <bands>...].
    Masked pixels come back as None and stay absent.
    """
    if not rows:
        return []

    header = rows[0]
    time_idx = header.index('time')
    band_idx = {band: header.index(band) for band in bands if band in header}

    observations = []
    for row in rows[1:]:
        if row[time_idx] is None:
            continue
        channels = {band: row[idx] for band, idx in band_idx.items()}
        observations.append(Observation(timestamp=from_millis(row[time_idx]), channels=channels))
    return observations


def _evaluate(func, what):
    try:
        return func()
    except (ee.EEException, OSError) as e:
        logger.error("Earth Engine %s failed: %s", what, e)
        raise ArchiveUnavailable(f"Earth Engine {what} failed: {e}") from e


class EarthEngineArchive(ImageArchive):

    def __init__(self, collection=config.S2_COLLECTION, bands=None, scale=config.SAMPLING_SCALE,
                 cloud_max=config.CLOUD_THRESH):
        self.collection = collection
        self.bands = list(bands or config.S2_BANDS)
        self.scale = scale
        self.cloud_max = cloud_max

    @staticmethod
    def _geometry(point):
        return ee.Geometry.Point([point.lon, point.lat])

    def query(self, point, date_range):
        """All Sentinel-2 observations at the point within date_range (start inclusive, end exclusive)."""
        start_date, end_date = date_range
        geometry = self._geometry(point)

        # CLOUDY_PIXEL_PERCENTAGE is a coarse pre-filter, per-pixel QA60 masking happens later
        s2 = retrieve_sensor_data(self.collection, geometry, start_date, end_date, cloud_max=self.cloud_max)
        region = s2.select(self.bands).getRegion(geometry, self.scale)

        rows = _evaluate(region.getInfo, "time-series query")
        observations = rows_to_observations(rows, self.bands)
        logger.debug("getRegion returned %d rows", len(observations))
        return observations

    def sample_raster(self, point, raster_id, bands):
        """First-value sample of the raster bands (selected by position, renamed to `bands`)."""
        image = ee.Image(raster_id).select(list(range(len(bands))), list(bands))
        sample = image.reduceRegion(
            reducer=ee.Reducer.first(),
            geometry=self._geometry(point),
            scale=self.scale,
            maxPixels=1e9
        )
        values = _evaluate(sample.getInfo, "raster sample") or {}
        return {band: values.get(band) for band in bands}

    def scene_at(self, point, day):
        """The first Sentinel-2 image over the point on `day`, with RGB and false color tile URLs."""
        start = ee.Date(day.isoformat())
        images = ee.ImageCollection(self.collection) \
            .filterBounds(self._geometry(point)) \
            .filterDate(start, start.advance(1, 'day'))

        count = _evaluate(images.size().getInfo, "scene lookup")
        if not count:
            return None

        image = images.first()
        image_id = _evaluate(image.get('system:index').getInfo, "scene lookup")
        return Scene(
            date=day,
            image_id=image_id,
            rgb_url=self._tile_url(image, config.RGB_BANDS),
            false_color_url=self._tile_url(image, config.FALSE_COLOR_BANDS),
        )

    def classification_layer(self, raster_id=None):
        """Frost classes, masked to the corn area."""
        frost_image = ee.Image(raster_id or config.CLASSIFICATION_ASSET)
        corn_mask = frost_image.select(0).eq(config.CORN_VALUE)
        frost_layer = frost_image.select(1).updateMask(corn_mask)
        url = _evaluate(lambda: frost_layer.getMapId(config.FROST_VIS)['tile_fetcher'].url_format,
                        "classification tiles")
        return TileLayer(name='Corn Frost Classification', url=url, shown=True)

    def study_layers(self, dates=None, region=None):
        """RGB and false color mosaics for the dates of interest. Only the first RGB layer is shown."""
        region = region or ee.Image(config.CLASSIFICATION_ASSET).geometry()
        s2 = ee.ImageCollection(self.collection).filterBounds(region)

        layers = []
        for i, day in enumerate(dates or config.DATES_OF_INTEREST):
            d = ee.Date(day)
            # Mosaic handles scenes split across tiles
            img = s2.filterDate(d, d.advance(1, 'day')).mosaic()
            layers.append(TileLayer(name=f'{day} (RGB)', url=self._tile_url(img, config.RGB_BANDS), shown=(i == 0)))
            layers.append(TileLayer(name=f'{day} (False Color)', url=self._tile_url(img, config.FALSE_COLOR_BANDS),
                                    shown=False))
        return layers

    @staticmethod
    def _tile_url(image, bands):
        vis = dict(config.S2_VIS, bands=list(bands))
        return _evaluate(lambda: image.getMapId(vis)['tile_fetcher'].url_format, "tile request")


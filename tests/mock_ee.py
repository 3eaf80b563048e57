class EEException(Exception):
    pass


class MockEE(object):
    """
    Mock Earth Engine namespace.
    Patched in place of the `ee` name of a module under test (modules.archive, utils).

    Args:
        region_rows: table returned by ImageCollection.getRegion().getInfo().
        raster_values: dict returned by Image.reduceRegion().getInfo().
        scene_count: value of ImageCollection.size().getInfo().
        scene_id: system:index of the first image.
        error: exception raised by every getInfo() / getMapId() call.
    """

    EEException = EEException

    def __init__(self, region_rows=None, raster_values=None, scene_count=0, scene_id=None, error=None):
        self.region_rows = region_rows
        self.raster_values = raster_values
        self.scene_count = scene_count
        self.scene_id = scene_id
        self.error = error
        self.calls = []

        mock = self

        class Image(MockEEObject):
            def __init__(self, value=None, *args, **kwargs):
                super(Image, self).__init__(mock, value)
                mock.calls.append(('Image', value))

        class ImageCollection(MockEEObject):
            def __init__(self, value=None, *args, **kwargs):
                super(ImageCollection, self).__init__(mock, value)
                mock.calls.append(('ImageCollection', value))

        class Geometry(object):
            @staticmethod
            def Point(coords):
                mock.calls.append(('Point', tuple(coords)))
                return MockEEObject(mock, {'type': 'Point', 'coordinates': coords})

        class Filter(object):
            @staticmethod
            def lt(name, val):
                mock.calls.append(('Filter.lt', name, val))
                return ('lt', name, val)

        class Reducer(object):
            @staticmethod
            def first():
                return 'first'

        self.Image = Image
        self.ImageCollection = ImageCollection
        self.Geometry = Geometry
        self.Filter = Filter
        self.Reducer = Reducer

    def Date(self, value):
        return MockEEObject(self, value)

    def Initialize(self, *args, **kwargs):
        self.calls.append(('Initialize', kwargs))

    def Authenticate(self, *args, **kwargs):
        self.calls.append(('Authenticate',))


class MockEEObject(object):
    """Base class for all mock EE objects. Chaining calls return self."""

    def __init__(self, mock, value=None):
        self._mock = mock
        self._value = value

    def getInfo(self):
        if self._mock.error is not None:
            raise self._mock.error
        return self._value

    def _chain(self, name, *args):
        self._mock.calls.append((name,) + args)
        return self

    def filterBounds(self, geometry):
        return self._chain('filterBounds')

    def filterDate(self, start, end):
        return self._chain('filterDate', start, end)

    def filter(self, flt):
        return self._chain('filter', flt)

    def select(self, *args):
        return self._chain('select', *args)

    def eq(self, val):
        return self

    def updateMask(self, mask):
        return self

    def mosaic(self):
        return self

    def geometry(self):
        return self

    def advance(self, delta, unit):
        return MockEEObject(self._mock, (self._value, delta, unit))

    def getRegion(self, geometry, scale):
        self._mock.calls.append(('getRegion', scale))
        return MockEEObject(self._mock, self._mock.region_rows)

    def reduceRegion(self, reducer=None, geometry=None, scale=None, maxPixels=None):
        self._mock.calls.append(('reduceRegion', reducer, scale))
        return MockEEObject(self._mock, self._mock.raster_values)

    def size(self):
        return MockEEObject(self._mock, self._mock.scene_count)

    def first(self):
        return MockEEObject(self._mock, 'first')

    def get(self, prop):
        return MockEEObject(self._mock, self._mock.scene_id)

    def getMapId(self, vis):
        if self._mock.error is not None:
            raise self._mock.error
        bands = ",".join(vis.get('bands', []))

        class TileFetcher(object):
            url_format = f"https://earthengine.googleapis.com/tiles/{bands or 'classes'}/{{z}}/{{x}}/{{y}}"

        return {'mapid': 'mock', 'tile_fetcher': TileFetcher()}

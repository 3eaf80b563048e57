class ArchiveUnavailable(Exception):
    """
    The image archive (or the classification raster) could not be queried.

    Raised for network failures, timeouts and Earth Engine errors. The assembly
    of the whole series fails; no partial series is ever returned.
    """


class MissingQualityBand(ValueError):
    """An observation does not carry the QA band needed for cloud masking."""

    def __init__(self, timestamp, band):
        super().__init__(f"Observation at {timestamp} has no '{band}' band")
        self.timestamp = timestamp
        self.band = band

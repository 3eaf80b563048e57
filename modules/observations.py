"""
Observation data model shared by the time-series pipeline.

An Observation is one timestamped reading at a point. Its channels map a band
or derived value name to a float, or to None when the value is absent. Absent
is never the same as 0.0: an absent value is not plotted as a reading.
"""

import math
import pandas as pd
from collections import namedtuple
from datetime import datetime, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Point(namedtuple('Point', ['lon', 'lat'])):
    __slots__ = ()

    @classmethod
    def parse(cls, lon, lat):
        """Builds a Point from user input, raising ValueError on bad coordinates."""
        try:
            lon = float(lon)
            lat = float(lat)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid coordinates: lon={lon!r}, lat={lat!r}")

        if math.isnan(lon) or math.isnan(lat):
            raise ValueError("Coordinates must be numbers")
        if not -180 <= lon <= 180:
            raise ValueError(f"Longitude {lon} out of bounds")
        if not -90 <= lat <= 90:
            raise ValueError(f"Latitude {lat} out of bounds")
        return cls(lon, lat)


Observation = namedtuple('Observation', ['timestamp', 'channels', 'synthetic'], defaults=(False,))


def with_channels(observation, channels):
    """Returns a copy of the observation carrying exactly `channels`."""
    return observation._replace(channels=dict(channels))


def from_millis(millis):
    return datetime.fromtimestamp(millis / 1000.0, tz=timezone.utc)


def to_millis(timestamp):
    return int(round((timestamp - EPOCH).total_seconds() * 1000))


class ObservationSeries:
    """
    Chronologically ordered, band-aligned observations ready for charting.

    Every observation exposes exactly the channels in `channels`, in that order.
    """

    def __init__(self, observations, channels):
        self.observations = list(observations)
        self.channels = tuple(channels)

    def __len__(self):
        return len(self.observations)

    def __iter__(self):
        return iter(self.observations)

    def __getitem__(self, item):
        return self.observations[item]

    def __eq__(self, other):
        if not isinstance(other, ObservationSeries):
            return NotImplemented
        return self.channels == other.channels and self.observations == other.observations

    def __repr__(self):
        return f"ObservationSeries(channels={self.channels}, size={len(self)})"

    def timestamps(self):
        return [obs.timestamp for obs in self.observations]

    def values(self, channel):
        if channel not in self.channels:
            raise KeyError(f"Channel '{channel}' not in series {self.channels}")
        return [obs.channels[channel] for obs in self.observations]

    def to_records(self):
        """JSON-friendly rows: ISO timestamp, epoch millis and one key per channel."""
        records = []
        for obs in self.observations:
            record = {
                'timestamp': obs.timestamp.isoformat(),
                'time': to_millis(obs.timestamp),
            }
            for channel in self.channels:
                record[channel] = obs.channels[channel]
            records.append(record)
        return records

    def to_dataframe(self):
        columns = ['timestamp'] + list(self.channels)
        rows = [[obs.timestamp] + [obs.channels[c] for c in self.channels] for obs in self.observations]
        df = pd.DataFrame(rows, columns=columns)
        for channel in self.channels:
            df[channel] = pd.to_numeric(df[channel], errors='coerce')
        return df

"""
Synthetic frost-event markers.

A chart that only draws one continuous line per channel can still show an
event date: two points one hour apart on a dedicated marker channel, going
from 0 to 1, render as a near-vertical line on a 0-1 secondary axis.
"""

import config
from collections import namedtuple
from datetime import datetime, timedelta, timezone

from modules.classifier import is_frost_event
from modules.observations import Observation

EventMarkerSpec = namedtuple(
    'EventMarkerSpec',
    ['event_date', 'before_value', 'after_value', 'offset'],
    defaults=(0.0, 1.0, timedelta(hours=1))
)


def event_marker_spec(category, study_year=None):
    """EventMarkerSpec for a frost category, None for every other category."""
    if not is_frost_event(category):
        return None

    study_year = study_year or config.STUDY_YEAR
    month, day = config.FROST_DATES[category]
    return EventMarkerSpec(event_date=datetime(study_year, month, day, tzinfo=timezone.utc))


def synthesize_markers(spec, marker_channel=config.MARKER_CHANNEL, index_channel=config.INDEX_CHANNEL):
    """
    Two synthetic observations bracketing the event date.

    The index channel is present but absent-valued so it is never plotted as a reading.
    """
    before = Observation(
        timestamp=spec.event_date,
        channels={marker_channel: spec.before_value, index_channel: None},
        synthetic=True,
    )
    after = Observation(
        timestamp=spec.event_date + spec.offset,
        channels={marker_channel: spec.after_value, index_channel: None},
        synthetic=True,
    )
    return [before, after]


def event_markers(category, study_year=None):
    spec = event_marker_spec(category, study_year=study_year)
    if spec is None:
        return []
    return synthesize_markers(spec)

import logging
from datetime import date, datetime, timezone

from dateutil import parser as date_parser

from modules.observations import from_millis

logger = logging.getLogger(__name__)


def _millis_to_moment(millis, value):
    try:
        return from_millis(millis)
    except (OverflowError, OSError, ValueError):
        raise ValueError(f"Unrecognised date: {value!r}")


def click_to_day(value):
    """
    UTC calendar day of a chart timeline click.

    Accepts epoch milliseconds, an ISO date/datetime string, a datetime or a date.
    """
    if value is None or value == '':
        raise ValueError("No date selected")

    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        return value
    elif isinstance(value, (int, float)):
        moment = _millis_to_moment(value, value)
    else:
        text = str(value).strip()
        if text.lstrip('-').isdigit():
            moment = _millis_to_moment(int(text), value)
        else:
            try:
                moment = date_parser.isoparse(text)
            except (OverflowError, ValueError):
                raise ValueError(f"Unrecognised date: {value!r}")

    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date()


def lookup_scene(point, when, archive):
    """
    The archive scene for the clicked day, or None when no image covers the point that day.

    Archive failures propagate as ArchiveUnavailable.
    """
    day = click_to_day(when)
    scene = archive.scene_at(point, day)
    if scene is None:
        logger.info("No scene at (%.4f, %.4f) on %s", point.lon, point.lat, day)
    return scene

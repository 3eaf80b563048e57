import config
from collections import namedtuple

SeriesStyle = namedtuple('SeriesStyle', ['channel', 'color', 'line_width', 'point_size', 'axis', 'label'])
AxisSpec = namedtuple('AxisSpec', ['title', 'view_min', 'view_max', 'show_labels'])
ChartSpec = namedtuple('ChartSpec', ['title', 'series', 'v_axes', 'h_axis_title', 'h_axis_format', 'interpolate_nulls'])

MARKER_COLOR = 'black'
MARKER_LABEL = 'Frost Event'
INDEX_LABEL = 'NDVI'


def chart_title(classification, point):
    return f"Sentinel-2 NDVI | {classification.label} | Lat: {point.lat:.4f} Lon: {point.lon:.4f}"


def series_style(channel, classification):
    if channel == config.MARKER_CHANNEL:
        return SeriesStyle(channel=channel, color=MARKER_COLOR, line_width=1, point_size=0, axis=1, label=MARKER_LABEL)
    if channel == config.INDEX_CHANNEL:
        return SeriesStyle(channel=channel, color=classification.color, line_width=2, point_size=3, axis=0,
                           label=INDEX_LABEL)
    raise ValueError(f"No chart style for channel '{channel}'")


def build_chart_spec(classification, channels, point):
    """
    Rendering instructions for the external chart component.

    Series are listed in channel order. Axis 0 holds the index, axis 1 (0-1, no
    tick labels) holds the frost marker line.
    """
    return ChartSpec(
        title=chart_title(classification, point),
        series=[series_style(channel, classification) for channel in channels],
        v_axes=[
            AxisSpec(title=INDEX_LABEL, view_min=0, view_max=1, show_labels=True),
            AxisSpec(title=None, view_min=0, view_max=1, show_labels=False),
        ],
        h_axis_title='Date',
        h_axis_format='MMM yy',
        interpolate_nulls=True,
    )


def chart_spec_to_dict(spec):
    return {
        'title': spec.title,
        'series': [s._asdict() for s in spec.series],
        'v_axes': [a._asdict() for a in spec.v_axes],
        'h_axis': {'title': spec.h_axis_title, 'format': spec.h_axis_format},
        'interpolate_nulls': spec.interpolate_nulls,
    }

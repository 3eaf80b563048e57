import json
import plotly.graph_objects as go
from plotly.subplots import make_subplots

# Chart-spec date format tokens -> d3 time format
DATE_FORMATS = {
    'MMM yy': '%b %y',
    'MMM yyyy': '%b %Y',
    'dd/MM/yyyy': '%d/%m/%Y',
}


def render_chart(spec, series, template="plotly_white"):
    """
    Plotly figure for an assembled series.

    One trace per channel in spec order. Axis 1 channels (frost marker) go on a
    hidden 0-1 secondary axis, absent values are gaps bridged when the chart
    asks for interpolation.
    """
    fig = make_subplots(specs=[[{"secondary_y": True}]])
    x = series.timestamps()

    for style in spec.series:
        y = series.values(style.channel)
        fig.add_trace(go.Scatter(x=x, y=y,
                                 mode='lines+markers' if style.point_size > 0 else 'lines',
                                 name=style.label,
                                 connectgaps=spec.interpolate_nulls,
                                 line=dict(color=style.color, width=style.line_width),
                                 marker=dict(color=style.color, size=style.point_size)),
                      secondary_y=(style.axis == 1))

    primary, secondary = spec.v_axes[0], spec.v_axes[1]
    fig.update_yaxes(title_text=primary.title, range=[primary.view_min, primary.view_max],
                     showticklabels=primary.show_labels, secondary_y=False)
    fig.update_yaxes(title_text=secondary.title, range=[secondary.view_min, secondary.view_max],
                     showticklabels=secondary.show_labels, showgrid=False, secondary_y=True)
    fig.update_xaxes(title_text=spec.h_axis_title,
                     tickformat=DATE_FORMATS.get(spec.h_axis_format, spec.h_axis_format))

    fig.update_layout(title_text=spec.title, template=template, height=400,
                      legend=dict(orientation='h', y=-0.25),
                      margin=dict(l=50, r=20, t=60, b=40))
    return fig


def figure_json(fig):
    """Figure as plain JSON data for Plotly.newPlot in the browser."""
    return json.loads(fig.to_json())

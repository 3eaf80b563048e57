import folium
import logging
import config
from folium.plugins import DualMap
from branca.element import MacroElement
from jinja2 import Template

logger = logging.getLogger(__name__)

EE_ATTRIBUTION = 'Google Earth Engine'


class ClickBridge(MacroElement):
    """
    Forwards map clicks to the host page and draws the selected point.

    The host page posts back {type: 'select'} to move the red dot and, on the
    imagery map, {type: 'scene'} to add the layers of a clicked chart date.
    """
    _template = Template("""
        {% macro script(this, kwargs) %}
        (function (map) {
            var selected = null;
            var sceneControl = null;
            map.getContainer().style.cursor = 'crosshair';
            map.on('click', function (e) {
                window.parent.postMessage({type: 'click', lat: e.latlng.lat, lon: e.latlng.lng}, '*');
            });
            window.addEventListener('message', function (event) {
                var msg = event.data || {};
                if (msg.type === 'select') {
                    if (selected) { map.removeLayer(selected); }
                    selected = L.circleMarker([msg.lat, msg.lon],
                        {radius: 5, color: 'red', fillColor: 'red', fillOpacity: 1}).addTo(map);
                } else if (msg.type === 'scene' && {{ this.show_scenes|tojson }}) {
                    if (!sceneControl) {
                        sceneControl = L.control.layers(null, null, {position: 'bottomright', collapsed: false}).addTo(map);
                    }
                    var rgb = L.tileLayer(msg.rgb_url, {attribution: '{{ this.attribution }}'}).addTo(map);
                    var falseColor = L.tileLayer(msg.false_color_url, {attribution: '{{ this.attribution }}'}).addTo(map);
                    sceneControl.addOverlay(rgb, 'Clicked Date RGB (' + msg.date + ')');
                    sceneControl.addOverlay(falseColor, 'Clicked Date False Color (' + msg.date + ')');
                }
            });
        })({{ this._parent.get_name() }});
        {% endmacro %}
    """)

    def __init__(self, show_scenes=False):
        super(ClickBridge, self).__init__()
        self._name = 'ClickBridge'
        self.show_scenes = show_scenes
        self.attribution = EE_ATTRIBUTION


class FrostLegend(MacroElement):
    _template = Template("""
        {% macro script(this, kwargs) %}
        var legend = L.control({position: 'bottomleft'});
        legend.onAdd = function (map) {
            var div = L.DomUtil.create('div', 'info legend');
            div.innerHTML = `{{ this.content }}`;
            div.style.backgroundColor = 'rgba(255, 255, 255, 0.9)';
            div.style.padding = '8px';
            div.style.border = '1px solid #ddd';
            div.style.fontSize = '12px';
            return div;
        };
        legend.addTo({{ this._parent.get_name() }});
        {% endmacro %}
    """)

    def __init__(self, rows):
        super(FrostLegend, self).__init__()
        self._name = 'FrostLegend'
        self.content = legend_html(rows)


def legend_html(rows):
    content = "<b>Legend</b>"
    for row in rows:
        content += f"""
        <div style='display: flex; align-items: center; margin-top: 4px;'>
            <span style='background-color: {row['color']}; width: 16px; height: 16px; display: inline-block;'></span>
            <span style='margin-left: 6px;'>{row['label']}</span>
        </div>
        """
    return content


def add_tile_layer(layer, target):
    folium.TileLayer(
        tiles=layer.url,
        attr=EE_ATTRIBUTION,
        name=layer.name,
        overlay=True,
        show=layer.shown,
    ).add_to(target)


def create_frost_map(archive, output_file=None):
    """
    Split map: frost classification on the left, Sentinel-2 scenes on the right.

    Both maps are linked (pan/zoom together) and forward clicks to the host page.
    Returns the map; saved to `output_file` when given.
    """
    m = DualMap(location=list(config.MAP_CENTER), zoom_start=config.MAP_ZOOM, tiles=None)

    # Left: clean roadmap background to emphasize the classes
    folium.TileLayer('OpenStreetMap', name='Roadmap').add_to(m.m1)
    add_tile_layer(archive.classification_layer(), m.m1)
    m.m1.add_child(FrostLegend(config.LEGEND))
    m.m1.add_child(ClickBridge(show_scenes=False))

    # Right: satellite background plus the dates of interest
    folium.TileLayer('Esri.WorldImagery', name='Satellite').add_to(m.m2)
    layers = archive.study_layers()
    for layer in layers:
        add_tile_layer(layer, m.m2)
    m.m2.add_child(ClickBridge(show_scenes=True))

    folium.LayerControl(position='topright', collapsed=True).add_to(m.m1)
    folium.LayerControl(position='topright', collapsed=True).add_to(m.m2)

    logger.info("Frost map built with %d imagery layers", len(layers))

    if output_file:
        m.save(output_file)
        logger.info("Map saved to %s", output_file)
    return m

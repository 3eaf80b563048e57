import os
import logging
import threading
import config
from flask import Flask, Response, abort, jsonify, render_template, request

from logger import setup_logger
from utils import create_conn_ee
from modules.archive import EarthEngineArchive
from modules.assembler import assemble
from modules.chartspec import build_chart_spec, chart_spec_to_dict
from modules.errors import ArchiveUnavailable
from modules.observations import Point
from modules.scenes import lookup_scene
from front.charts import render_chart, figure_json
from front.map import create_frost_map

logger = logging.getLogger(__name__)

app = Flask(__name__)
_archive_lock = threading.Lock()


def get_archive():
    """The archive service; Earth Engine is initialised on first use."""
    archive = app.config.get("ARCHIVE")
    if archive is None:
        with _archive_lock:
            archive = app.config.get("ARCHIVE")
            if archive is None:
                create_conn_ee()
                archive = EarthEngineArchive()
                app.config["ARCHIVE"] = archive
    return archive


def request_point():
    try:
        return Point.parse(request.args.get("lon"), request.args.get("lat"))
    except ValueError as e:
        abort(400, description=str(e))


@app.errorhandler(400)
def bad_request(e):
    return jsonify({"error": e.description}), 400


@app.errorhandler(ArchiveUnavailable)
def archive_unavailable(e):
    logger.error("Archive unavailable: %s", e)
    return jsonify({"error": "Image archive unavailable. Please try again.", "detail": str(e)}), 502


@app.get("/")
def index():
    return render_template("index.html",
                           legend=config.LEGEND,
                           references=config.REFERENCES,
                           study_year=config.STUDY_YEAR)


@app.get("/map")
def frost_map():
    m = create_frost_map(get_archive())
    return m.get_root().render()


@app.get("/api/health")
def health():
    return jsonify({"status": "ok"})


@app.get("/api/legend")
def legend():
    return jsonify({"legend": config.LEGEND})


@app.get("/api/timeseries")
def timeseries():
    point = request_point()
    result = assemble(point, config.STUDY_WINDOW, archive=get_archive())
    spec = build_chart_spec(result.classification, result.channels, point)
    figure = render_chart(spec, result.series)

    return jsonify({
        # Echoed so the client can drop responses of superseded clicks
        "seq": request.args.get("seq"),
        "point": {"lon": point.lon, "lat": point.lat},
        "classification": result.classification._asdict(),
        "channels": list(result.channels),
        "series": result.series.to_records(),
        "chart_spec": chart_spec_to_dict(spec),
        "figure": figure_json(figure),
        "gmaps_url": f"https://www.google.com/maps/search/?api=1&query={point.lat},{point.lon}",
    })


@app.get("/api/scene")
def scene():
    point = request_point()
    try:
        found = lookup_scene(point, request.args.get("date"), get_archive())
    except ValueError as e:
        abort(400, description=str(e))

    if found is None:
        return jsonify({"error": "No Sentinel-2 image on that date."}), 404

    return jsonify({
        "date": found.date.isoformat(),
        "image_id": found.image_id,
        "rgb_url": found.rgb_url,
        "false_color_url": found.false_color_url,
    })


@app.get("/download")
def download_csv():
    """Serves the assembled series of a point as CSV."""
    point = request_point()
    result = assemble(point, config.STUDY_WINDOW, archive=get_archive())

    df = result.series.to_dataframe()
    df.insert(1, "category", result.classification.category)
    filename = f"ndvi_{point.lat:.4f}_{point.lon:.4f}.csv"
    return Response(df.to_csv(index=False), mimetype="text/csv",
                    headers={"Content-Disposition": f"attachment; filename={filename}"})


if __name__ == "__main__":
    setup_logger()
    # Earth Engine auth happens once, before serving
    get_archive()
    logger.info("Corn Frost Explorer started: http://127.0.0.1:5000")
    app.run(debug=os.getenv("FLASK_DEBUG") == "1", port=int(os.getenv("PORT", "5000")))

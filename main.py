import os
import json
import config
import hashlib
import logging
import argparse
import datetime

from logger import setup_logger
from utils import create_conn_ee
from modules.archive import EarthEngineArchive
from modules.assembler import assemble
from modules.chartspec import build_chart_spec, chart_spec_to_dict
from modules.observations import Point
from front.charts import render_chart

logger = logging.getLogger(__name__)


def run_pipeline(lon, lat, study_window=None, output_dir=config.OUTPUT_DIR, archive=None):
    """
    Assembles the NDVI series of one point and writes a traceable run bundle.

    Bundle (output/runs/<run_id>/): series.csv, chart_spec.json, chart.html,
    config_snapshot.json and run_manifest.json.

    Returns:
        str: path of the run manifest.

    Raises:
        ArchiveUnavailable: the archive could not be queried; no bundle is written.
    """
    point = Point.parse(lon, lat)
    study_window = study_window or config.STUDY_WINDOW
    if archive is None:
        create_conn_ee()
        archive = EarthEngineArchive()

    result = assemble(point, study_window, archive=archive)
    spec = build_chart_spec(result.classification, result.channels, point)

    # 1. Run ID and traceability directory
    run_id = datetime.datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    run_dir = os.path.join(output_dir, "runs", run_id)
    os.makedirs(run_dir, exist_ok=True)
    logger.info("Run ID: %s", run_id)

    # 2. Snapshot configuration
    config_dict = {k: v for k, v in vars(config).items() if not k.startswith("__") and k.isupper()}
    config_snapshot_path = os.path.join(run_dir, "config_snapshot.json")
    with open(config_snapshot_path, "w") as f:
        json.dump(config_dict, f, default=str, indent=4)
    with open(config_snapshot_path, "rb") as f:
        config_hash = hashlib.sha256(f.read()).hexdigest()

    # 3. Artifacts
    series_path = os.path.join(run_dir, "series.csv")
    result.series.to_dataframe().to_csv(series_path, index=False)

    spec_path = os.path.join(run_dir, "chart_spec.json")
    with open(spec_path, "w") as f:
        json.dump(chart_spec_to_dict(spec), f, indent=4)

    chart_path = os.path.join(run_dir, "chart.html")
    render_chart(spec, result.series).write_html(chart_path, include_plotlyjs="cdn")

    # 4. Run manifest
    manifest = {
        "run_id": run_id,
        "status": "SUCCESS",
        "timestamp": datetime.datetime.now().isoformat(),
        "point": {"lon": point.lon, "lat": point.lat},
        "study_window": list(study_window),
        "classification": result.classification._asdict(),
        "channels": list(result.channels),
        "observation_count": len(result.series),
        "config_snapshot_path": os.path.relpath(config_snapshot_path, start=output_dir),
        "config_snapshot_sha256": config_hash,
        "artifacts": {
            "series": {"path": os.path.relpath(series_path, start=output_dir), "type": "csv"},
            "chart_spec": {"path": os.path.relpath(spec_path, start=output_dir), "type": "json"},
            "chart": {"path": os.path.relpath(chart_path, start=output_dir), "type": "html"},
        }
    }

    manifest_path = os.path.join(run_dir, "run_manifest.json")
    with open(manifest_path, "w") as f:
        json.dump(manifest, f, indent=4)

    logger.info("Run Manifest created: %s", manifest_path)
    return manifest_path


if __name__ == "__main__":
    arg_parser = argparse.ArgumentParser(description="NDVI time series and frost class of a point")
    arg_parser.add_argument("--lon", type=float, required=True)
    arg_parser.add_argument("--lat", type=float, required=True)
    arg_parser.add_argument("--start", default=config.STUDY_START)
    arg_parser.add_argument("--end", default=config.STUDY_END)
    arg_parser.add_argument("--output", default=config.OUTPUT_DIR)
    args = arg_parser.parse_args()

    setup_logger()
    run_pipeline(args.lon, args.lat, study_window=(args.start, args.end), output_dir=args.output)

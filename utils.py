import os
import ee
import logging
import config

from google.oauth2 import service_account

logger = logging.getLogger(__name__)


def create_conn_ee(cred=None, project=None):
    cred = cred or config.EE_CREDENTIALS_FILE
    project = project or config.EE_PROJECT
    if os.path.exists(cred):
        logger.info("Connecting to Earth Engine using service account: %s", cred)
        credentials = service_account.Credentials.from_service_account_file(cred, scopes=["https://www.googleapis.com/auth/earthengine"])
        ee.Initialize(credentials=credentials, project=project)
    else:
        logger.info("Service account file not found. Falling back to browser-based authentication.")
        ee.Authenticate()
        ee.Initialize(project=project)


def retrieve_sensor_data(sensor_name, roi, start_date, end_date, **kwargs):
    """
    Retrieves and filters an Earth Engine ImageCollection.

    Args:
        sensor_name (str): The Earth Engine asset ID (e.g., 'COPERNICUS/S2_SR_HARMONIZED').
        roi (ee.Geometry): Region of Interest.
        start_date (str): Start date (YYYY-MM-DD).
        end_date (str): End date (YYYY-MM-DD), exclusive.
        **kwargs: Optional filters:
            - cloud_max (int/float): Max scene cloud percentage.
              (Automatically detects 'CLOUD_COVER' vs 'CLOUDY_PIXEL_PERCENTAGE' based on ID).

    Returns:
        ee.ImageCollection: The filtered collection.
    """
    col = ee.ImageCollection(sensor_name) \
        .filterBounds(roi) \
        .filterDate(start_date, end_date)

    if 'cloud_max' in kwargs:
        cloud_pct = kwargs['cloud_max']
        if 'S2' in sensor_name or 'COPERNICUS/S2' in sensor_name:
            prop = 'CLOUDY_PIXEL_PERCENTAGE'
        else:
            # Default to Landsat standard
            prop = 'CLOUD_COVER'

        col = col.filter(ee.Filter.lt(prop, cloud_pct))

    return col

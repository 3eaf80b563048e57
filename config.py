import os
import json

# Classification asset
# Band 0: Corn Mask (2 = Corn, 1 = No Corn/Other).
# Band 1: Frost Classification (1 = Harvested, 2 = Frost May 25, 3 = Frost June 30, 4 = Not Affected).
CLASSIFICATION_ASSET = 'projects/ee-victorohden/assets/GEEadas/GEEadas_Corn_Forst_PR'
CLASSIFICATION_BANDS = ['cropMask', 'frostClass']
CORN_VALUE = 2

# Sentinel-2 archive
S2_COLLECTION = 'COPERNICUS/S2_SR_HARMONIZED'
NIR_BAND = 'B8'
RED_BAND = 'B4'
QA_BAND = 'QA60'
S2_BANDS = [RED_BAND, NIR_BAND, QA_BAND]
CLOUD_BIT = 10
CIRRUS_BIT = 11
REFLECTANCE_SCALE = 10000
SAMPLING_SCALE = 10  # Native resolution of the classification raster (meters)
CLOUD_THRESH = 60    # Scene-level pre-filter on CLOUDY_PIXEL_PERCENTAGE

# Channels exposed by the assembled series
INDEX_CHANNEL = 'index'
MARKER_CHANNEL = 'marker'

# Study window (growing season 2020/2021)
STUDY_START = '2020-09-01'
STUDY_END = '2021-10-31'
STUDY_YEAR = 2021

# Frost events (month, day) within the study year
FROST_DATES = {
    'frost-event-A': (5, 25),
    'frost-event-B': (6, 30),
}

# Category table: (color, label)
CATEGORY_STYLES = {
    'not-crop': ('black', 'No corn mask'),
    'harvested': ('cyan', 'Harvested'),
    'frost-event-A': ('magenta', 'Affected by Frost: May 25'),
    'frost-event-B': ('blue', 'Affected by Frost: June 30'),
    'unaffected': ('green', 'Not Affected'),
    'unknown': ('gray', 'Unknown Class'),
}

LEGEND = [
    {'color': '#00FFFF', 'label': 'Harvested'},
    {'color': '#FF00FF', 'label': 'Frost Event: May 25'},
    {'color': '#0000FF', 'label': 'Frost Event: June 30'},
    {'color': '#008000', 'label': 'Not Affected'},
]

# Map page
MAP_CENTER = (-24.5, -53.5)  # (lat, lon) Western Parana
MAP_ZOOM = 9
FROST_VIS = {'min': 1, 'max': 4, 'palette': ['#00FFFF', '#FF00FF', '#0000FF', '#008000']}
RGB_BANDS = ['B4', 'B3', 'B2']
FALSE_COLOR_BANDS = ['B8', 'B11', 'B4']
S2_VIS = {'min': 0, 'max': 3000, 'gamma': 1.4}

# Pre-frost, frost and post-frost scenes shown on the map
DATES_OF_INTEREST = [
    '2021-03-16',
    '2021-04-20',
    '2021-06-04',
    '2021-07-09',
    '2021-07-29'
]

REFERENCES = [
    {'label': 'Read the Paper (ScienceDirect)',
     'url': 'https://www.sciencedirect.com/science/article/pii/S2352938525003520'},
    {'label': 'Download Classification Dataset (Zenodo)', 'url': 'https://zenodo.org/records/18167593'},
    {'label': 'Download Frost Dataset (Zenodo)', 'url': 'https://zenodo.org/records/18245506'},
]

# Earth Engine credentials
EE_CREDENTIALS_FILE = os.getenv('EE_CREDENTIALS_FILE', 'google_cred.json')
EE_PROJECT = os.getenv('EE_PROJECT')
ARCHIVE_WORKERS = 2

OUTPUT_DIR = 'output'

# Deployment overrides
if os.path.exists('deployment.json'):
    try:
        with open('deployment.json', 'r') as f:
            deployment = json.load(f)
            STUDY_START = deployment.get('study_start', STUDY_START)
            STUDY_END = deployment.get('study_end', STUDY_END)
            STUDY_YEAR = int(deployment.get('study_year', STUDY_YEAR))
            CLASSIFICATION_ASSET = deployment.get('classification_asset', CLASSIFICATION_ASSET)
    except (OSError, ValueError) as e:
        print(f"Error loading deployment.json: {e}. Using default study window.")

STUDY_WINDOW = (STUDY_START, STUDY_END)

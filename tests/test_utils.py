import unittest
import sys
import os
import tempfile
from unittest.mock import MagicMock, patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import utils
from tests.mock_ee import MockEE


class TestEarthEngineConnection(unittest.TestCase):
    """
    Earth Engine initialisation and collection filtering.
    Target: utils.py
    """

    def test_browser_fallback(self):
        mock = MockEE()
        with patch("utils.ee", mock):
            utils.create_conn_ee(cred="/nonexistent/google_cred.json", project="frost-project")
        self.assertEqual(mock.calls, [('Authenticate',), ('Initialize', {'project': 'frost-project'})])

    def test_service_account(self):
        mock = MockEE()
        credentials = MagicMock()
        with tempfile.NamedTemporaryFile(suffix=".json") as cred, \
                patch("utils.ee", mock), \
                patch("utils.service_account.Credentials.from_service_account_file",
                      return_value=credentials) as from_file:
            utils.create_conn_ee(cred=cred.name, project="frost-project")
            from_file.assert_called_once()
        self.assertEqual(mock.calls, [('Initialize', {'credentials': credentials, 'project': 'frost-project'})])

    def test_cloud_filter_property(self):
        mock = MockEE()
        with patch("utils.ee", mock):
            utils.retrieve_sensor_data('COPERNICUS/S2_SR_HARMONIZED', None, '2021-01-01', '2021-02-01', cloud_max=20)
            utils.retrieve_sensor_data('LANDSAT/LC08/C02/T1_L2', None, '2021-01-01', '2021-02-01', cloud_max=30)
            utils.retrieve_sensor_data('COPERNICUS/S2_SR_HARMONIZED', None, '2021-01-01', '2021-02-01')
        filters = [call for call in mock.calls if call[0] == 'Filter.lt']
        self.assertEqual(filters, [('Filter.lt', 'CLOUDY_PIXEL_PERCENTAGE', 20), ('Filter.lt', 'CLOUD_COVER', 30)])


if __name__ == "__main__":
    unittest.main()

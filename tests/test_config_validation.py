import unittest
import sys
import os
from datetime import datetime

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config
from modules.classifier import FROST_CATEGORIES, FROST_CODES, UNKNOWN, NOT_CROP


class TestConfigValidation(unittest.TestCase):
    """
    Validates the integrity of the configuration (config.py).
    Ensures that the study window, frost dates and thresholds are consistent.
    """

    def test_study_window(self):
        """Verify the study window is valid and chronological."""
        fmt = "%Y-%m-%d"
        start = datetime.strptime(config.STUDY_START, fmt)
        end = datetime.strptime(config.STUDY_END, fmt)
        self.assertLess(start, end, "STUDY_START must be before STUDY_END")
        self.assertEqual(config.STUDY_WINDOW, (config.STUDY_START, config.STUDY_END))

    def test_frost_dates_inside_window(self):
        fmt = "%Y-%m-%d"
        start = datetime.strptime(config.STUDY_START, fmt)
        end = datetime.strptime(config.STUDY_END, fmt)
        for category, (month, day) in config.FROST_DATES.items():
            event = datetime(config.STUDY_YEAR, month, day)
            self.assertTrue(start <= event < end, f"{category} frost date outside the study window")
        self.assertEqual(set(config.FROST_DATES), set(FROST_CATEGORIES))

    def test_thresholds(self):
        self.assertTrue(0 <= config.CLOUD_THRESH <= 100, "CLOUD_THRESH must be a percentage")
        self.assertGreater(config.SAMPLING_SCALE, 0)
        self.assertGreater(config.REFLECTANCE_SCALE, 0)
        self.assertGreaterEqual(config.ARCHIVE_WORKERS, 2, "classification and query run concurrently")

    def test_category_styles(self):
        categories = set(FROST_CODES.values()) | {UNKNOWN, NOT_CROP}
        self.assertEqual(set(config.CATEGORY_STYLES), categories)
        for category, (color, label) in config.CATEGORY_STYLES.items():
            self.assertTrue(color, f"{category} has no color")
            self.assertTrue(label, f"{category} has no label")

    def test_quality_bits(self):
        self.assertNotEqual(config.CLOUD_BIT, config.CIRRUS_BIT)
        self.assertIn(config.QA_BAND, config.S2_BANDS)
        self.assertIn(config.NIR_BAND, config.S2_BANDS)
        self.assertIn(config.RED_BAND, config.S2_BANDS)


if __name__ == "__main__":
    unittest.main()

import unittest
import sys
import os
from datetime import date, datetime, timezone, timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from modules.errors import ArchiveUnavailable
from modules.observations import Point
from modules.scenes import click_to_day, lookup_scene
from tests.fakes import FakeArchive, make_scene, utc


class TestTimelineClick(unittest.TestCase):
    """
    Chart timeline click -> archive scene of that day.
    Target: modules/scenes.py
    """

    def setUp(self):
        self.point = Point(-53.5, -24.5)

    def test_click_values(self):
        expected = date(2021, 5, 25)
        cases = [
            1621949400000,                      # 2021-05-25T13:30:00Z in millis
            '1621949400000',
            '2021-05-25',
            '2021-05-25T13:30:00Z',
            '2021-05-25T13:30:00.123+00:00',
            utc(2021, 5, 25, 13, 30),
            date(2021, 5, 25),
        ]
        for value in cases:
            with self.subTest(value=value):
                self.assertEqual(click_to_day(value), expected)

    def test_timezone_normalised_to_utc(self):
        local = datetime(2021, 5, 24, 22, 0, tzinfo=timezone(timedelta(hours=-3)))
        self.assertEqual(click_to_day(local), date(2021, 5, 25))

    def test_invalid_click(self):
        for value in (None, '', 'yesterday', '99999999999999999999', 10 ** 20, float('nan')):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    click_to_day(value)

    def test_lookup_scene(self):
        scene = make_scene(date(2021, 6, 4))
        archive = FakeArchive(scenes={date(2021, 6, 4): scene})
        self.assertEqual(lookup_scene(self.point, '2021-06-04T13:31:00Z', archive), scene)
        self.assertEqual(archive.calls, [('scene_at', self.point, date(2021, 6, 4))])

    def test_no_scene(self):
        self.assertIsNone(lookup_scene(self.point, '2021-06-05', FakeArchive()))

    def test_archive_failure_propagates(self):
        class BrokenArchive(FakeArchive):
            def scene_at(self, point, day):
                raise ArchiveUnavailable("scene lookup failed")

        with self.assertRaises(ArchiveUnavailable):
            lookup_scene(self.point, '2021-06-04', BrokenArchive())


if __name__ == "__main__":
    unittest.main()

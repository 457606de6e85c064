import unittest
from core.engine import quick_breaker_lookup
from core.models import LoadType, Standard
from core.ratings import interrupting_rating_for, select_standard_rating
from standards import iec_tables, nec_tables
from standards.trip_curves import IEC_TRIP_CURVES, NEC_TRIP_TYPES, recommend_trip_curve

class TestRatingLadders(unittest.TestCase):
    def test_ladders_are_ascending(self):
        self.assertEqual(len(nec_tables.BREAKER_RATINGS), 35)
        self.assertEqual(len(iec_tables.BREAKER_RATINGS), 28)
        for ladder in (nec_tables.BREAKER_RATINGS, iec_tables.BREAKER_RATINGS):
            self.assertEqual(list(ladder), sorted(set(ladder)))
            self.assertEqual(ladder[-1], 4000)

    def test_selection(self):
        ladder = nec_tables.BREAKER_RATINGS
        # Exact equality selects that rating
        self.assertEqual(select_standard_rating(50, ladder), 50)
        self.assertEqual(select_standard_rating(50.0001, ladder), 60)
        self.assertEqual(select_standard_rating(0.5, ladder), 15)
        self.assertEqual(select_standard_rating(4000, ladder), 4000)
        self.assertIsNone(select_standard_rating(4000.1, ladder))

        self.assertEqual(select_standard_rating(5, iec_tables.BREAKER_RATINGS), 6)
        self.assertEqual(select_standard_rating(63, iec_tables.BREAKER_RATINGS), 63)
        self.assertEqual(select_standard_rating(63.5, iec_tables.BREAKER_RATINGS), 80)

    def test_quick_lookup_applies_safety_factor(self):
        # NEC: 46.3 * 1.25 = 57.9 A -> 60 A; IEC: 46.3 A -> 50 A
        self.assertEqual(quick_breaker_lookup(46.3, Standard.NEC), 60)
        self.assertEqual(quick_breaker_lookup(46.3, Standard.IEC), 50)
        self.assertEqual(quick_breaker_lookup(17, Standard.IEC), 20)
        # 3300 * 1.25 = 4125 A > 4000 A
        self.assertIsNone(quick_breaker_lookup(3300, Standard.NEC))
        self.assertEqual(quick_breaker_lookup(3300, Standard.IEC), 4000)

class TestInterruptingRatings(unittest.TestCase):
    def test_nec_bands(self):
        bands = nec_tables.INTERRUPTING_RATINGS
        self.assertEqual(interrupting_rating_for(60, bands), 10.0)
        self.assertEqual(interrupting_rating_for(100, bands), 10.0)
        self.assertEqual(interrupting_rating_for(200, bands), 25.0)
        self.assertEqual(interrupting_rating_for(800, bands), 35.0)
        self.assertEqual(interrupting_rating_for(4000, bands), 65.0)

    def test_iec_bands(self):
        bands = iec_tables.INTERRUPTING_RATINGS
        self.assertEqual(interrupting_rating_for(125, bands), 10.0)
        self.assertEqual(interrupting_rating_for(160, bands), 25.0)
        self.assertEqual(interrupting_rating_for(630, bands), 36.0)

    def test_every_rating_has_a_band(self):
        for ladder, bands in ((nec_tables.BREAKER_RATINGS, nec_tables.INTERRUPTING_RATINGS),
                              (iec_tables.BREAKER_RATINGS, iec_tables.INTERRUPTING_RATINGS)):
            for rating in ladder:
                self.assertGreater(interrupting_rating_for(rating, bands), 0)

    def test_outside_bands(self):
        with self.assertRaises(ValueError):
            interrupting_rating_for(5000, nec_tables.INTERRUPTING_RATINGS)

class TestTripCurves(unittest.TestCase):
    def test_iec_decision_table(self):
        expected = {
            LoadType.RESISTIVE: "B",
            LoadType.INDUCTIVE: "D",
            LoadType.MIXED: "C",
            LoadType.CAPACITIVE: "C",
        }
        for load_type, curve in expected.items():
            trip = recommend_trip_curve(load_type, Standard.IEC)
            self.assertEqual(trip.recommendation, curve)
            self.assertIn(curve, IEC_TRIP_CURVES)
            self.assertTrue(trip.rationale)

    def test_nec_decision_table(self):
        expected = {
            LoadType.RESISTIVE: "thermal-magnetic",
            LoadType.INDUCTIVE: "adjustable-magnetic",
            LoadType.MIXED: "thermal-magnetic",
            LoadType.CAPACITIVE: "thermal-magnetic",
        }
        for load_type, mechanism in expected.items():
            trip = recommend_trip_curve(load_type, Standard.NEC)
            self.assertEqual(trip.recommendation, mechanism)
            self.assertIn(mechanism, NEC_TRIP_TYPES)

    def test_motor_curve_tolerates_inrush(self):
        d_curve = IEC_TRIP_CURVES["D"]
        self.assertEqual(d_curve.magnetic_band, (10.0, 20.0))
        self.assertIn("Motors", d_curve.applications)

if __name__ == '__main__':
    unittest.main()

# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

"""
Document expiry evaluation:
- expire: before today
- a_renouveler: within the alert window, bounds included
- valide: beyond the window or without expiry date
"""

from datetime import date, datetime, timedelta

from odoo.tests import TransactionCase, tagged

from odoo.addons.custom_fleet_sdbk.exceptions import InvalidDateError

TODAY = date(2025, 1, 1)


@tagged('post_install', '-at_install', 'sdbk')
class TestDocumentExpiry(TransactionCase):

    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.Expiry = cls.env['fleet.sdbk.expiry.service']

    def _evaluate(self, expiry_date, alert_days=30):
        return self.Expiry.evaluate(expiry_date, today=TODAY, alert_days=alert_days)

    def test_expiring_within_window(self):
        result = self._evaluate(date(2025, 1, 20))
        self.assertEqual(result, {'alert_level': 'a_renouveler', 'jours_restants': 19})

    def test_expired_yesterday(self):
        result = self._evaluate(date(2024, 12, 31))
        self.assertEqual(result, {'alert_level': 'expire', 'jours_restants': -1})

    def test_relative_to_today(self):
        self.assertEqual(self._evaluate(TODAY + timedelta(days=15)), {'alert_level': 'a_renouveler', 'jours_restants': 15})
        self.assertEqual(self._evaluate(TODAY - timedelta(days=3)), {'alert_level': 'expire', 'jours_restants': -3})

    def test_no_expiry_date_is_valid(self):
        self.assertEqual(self._evaluate(None), {'alert_level': 'valide', 'jours_restants': None})
        self.assertEqual(self._evaluate(False), {'alert_level': 'valide', 'jours_restants': None})

    def test_window_bounds(self):
        """Today and J-30 are both 'a_renouveler', J-31 is 'valide'."""
        self.assertEqual(self._evaluate(TODAY)['alert_level'], 'a_renouveler')
        self.assertEqual(self._evaluate(TODAY)['jours_restants'], 0)
        self.assertEqual(self._evaluate(TODAY + timedelta(days=30))['alert_level'], 'a_renouveler')
        self.assertEqual(self._evaluate(TODAY + timedelta(days=31))['alert_level'], 'valide')

    def test_level_is_monotonic(self):
        """Moving the expiry date later never makes the level more severe."""
        severity = {'expire': 2, 'a_renouveler': 1, 'valide': 0}
        previous = None
        for offset in range(-40, 60):
            result = self._evaluate(TODAY + timedelta(days=offset))
            self.assertEqual(result['jours_restants'], offset)
            if previous is not None:
                self.assertLessEqual(severity[result['alert_level']], previous)
            previous = severity[result['alert_level']]

    def test_custom_alert_window(self):
        self.assertEqual(self._evaluate(date(2025, 1, 20), alert_days=10)['alert_level'], 'valide')

    def test_configured_alert_window(self):
        self.env['ir.config_parameter'].sudo().set_param('custom_fleet_sdbk.alert_days_before_expiry', 15)
        self.assertEqual(self.Expiry.get_alert_days(), 15)
        result = self.Expiry.evaluate(date(2025, 1, 20), today=TODAY)
        self.assertEqual(result['alert_level'], 'valide')

    def test_accepts_strings_and_datetimes(self):
        self.assertEqual(self._evaluate('2025-01-20')['jours_restants'], 19)
        self.assertEqual(self._evaluate(datetime(2025, 1, 20, 23, 59))['jours_restants'], 19)
        result = self.Expiry.evaluate('2025-01-20', today='2025-01-01', alert_days=30)
        self.assertEqual(result['alert_level'], 'a_renouveler')

    def test_invalid_dates(self):
        with self.assertRaises(InvalidDateError):
            self._evaluate('not-a-date')
        with self.assertRaises(InvalidDateError):
            self._evaluate('2025-13-45')
        with self.assertRaises(InvalidDateError):
            self._evaluate(20250120)
        with self.assertRaises(InvalidDateError):
            self.Expiry.evaluate(date(2025, 1, 20), today='31/12/2024')

    def test_critical_window(self):
        self.assertTrue(self.Expiry.is_critical(-3))
        self.assertTrue(self.Expiry.is_critical(7))
        self.assertFalse(self.Expiry.is_critical(8))
        self.assertFalse(self.Expiry.is_critical(None))

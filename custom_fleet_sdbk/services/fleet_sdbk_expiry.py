# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

"""Document expiry evaluation.

Classifies a compliance document from its expiration date:
- expire: expiration date strictly before today
- a_renouveler: expiration within the alert window (J-30 by default, inclusive)
- valide: otherwise, including documents without expiration date

Usage:
    service = self.env["fleet.sdbk.expiry.service"]
    result = service.evaluate(doc.expiry_date, today=date(2025, 1, 1))
    result['alert_level'], result['jours_restants']
"""
import logging
from datetime import date, datetime

from odoo import _, api, fields, models

from ..const import DEFAULT_ALERT_DAYS, DEFAULT_CRITICAL_DAYS
from ..exceptions import InvalidDateError

_logger = logging.getLogger(__name__)


class FleetSdbkExpiryService(models.AbstractModel):
    _name = "fleet.sdbk.expiry.service"
    _description = "Service d'évaluation des échéances documents"

    # -------------------------------------------------------------------------
    # CONFIGURATION
    # -------------------------------------------------------------------------
    @api.model
    def get_alert_days(self):
        ConfigParam = self.env['ir.config_parameter'].sudo()
        return int(ConfigParam.get_param(
            'custom_fleet_sdbk.alert_days_before_expiry', DEFAULT_ALERT_DAYS
        ))

    @api.model
    def get_critical_days(self):
        ConfigParam = self.env['ir.config_parameter'].sudo()
        return int(ConfigParam.get_param(
            'custom_fleet_sdbk.critical_days_before_expiry', DEFAULT_CRITICAL_DAYS
        ))

    # -------------------------------------------------------------------------
    # EVALUATION
    # -------------------------------------------------------------------------
    @api.model
    def to_date(self, value, field_label=None):
        """Normalize ``value`` to a calendar date.

        Accepts date, datetime (its date part) and ISO strings. Empty values
        return None. Anything else raises InvalidDateError.
        """
        if not value:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                return fields.Date.to_date(value.strip()[:10])
            except ValueError as e:
                raise InvalidDateError(_(
                    "Date invalide pour %s: %s", field_label or _("la date"), value
                )) from e
        raise InvalidDateError(_(
            "Date invalide pour %s: %s", field_label or _("la date"), value
        ))

    @api.model
    def evaluate(self, expiry_date, today=None, alert_days=None):
        """Classify a document expiry date.

        Args:
            expiry_date: date, datetime, ISO string or False/None
            today: reference day (default: today in the user's timezone)
            alert_days: renewal window in days (default: configuration, 30)

        Returns:
            dict: {'alert_level': 'expire'|'a_renouveler'|'valide',
                   'jours_restants': int or None}
        """
        expiry = self.to_date(expiry_date, _("la date d'expiration"))
        if today is None:
            today = fields.Date.context_today(self)
        else:
            today = self.to_date(today, _("la date du jour"))
            if not today:
                raise InvalidDateError(_("La date du jour est obligatoire."))
        if alert_days is None:
            alert_days = self.get_alert_days()

        if not expiry:
            return {'alert_level': 'valide', 'jours_restants': None}

        days_left = (expiry - today).days
        if days_left < 0:
            level = 'expire'
        elif days_left <= alert_days:
            level = 'a_renouveler'
        else:
            level = 'valide'
        return {'alert_level': level, 'jours_restants': days_left}

    @api.model
    def is_critical(self, jours_restants):
        """Expired or expiring within the critical window (J-7 by default)."""
        if jours_restants is None:
            return False
        return jours_restants <= self.get_critical_days()

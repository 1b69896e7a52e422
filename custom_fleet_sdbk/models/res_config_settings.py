# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

from odoo import fields, models

from ..const import DEFAULT_ALERT_DAYS, DEFAULT_CRITICAL_DAYS


class ResConfigSettings(models.TransientModel):
    """Paramètres du processus SDBK.

    Tous les champs sont préfixés 'custom_fleet_sdbk_', toutes les clés
    ir.config_parameter par 'custom_fleet_sdbk.'.
    """
    _inherit = 'res.config.settings'

    custom_fleet_sdbk_alert_days_before_expiry = fields.Integer(
        string="Jours avant échéance pour alerte",
        help="Fenêtre de renouvellement des documents (J-X). Par défaut: 30 jours.",
        config_parameter='custom_fleet_sdbk.alert_days_before_expiry',
        default=DEFAULT_ALERT_DAYS,
    )

    custom_fleet_sdbk_critical_days_before_expiry = fields.Integer(
        string="Jours avant échéance critique",
        help="En deçà, l'alerte d'échéance est signalée comme urgente. Par défaut: 7 jours.",
        config_parameter='custom_fleet_sdbk.critical_days_before_expiry',
        default=DEFAULT_CRITICAL_DAYS,
    )

    custom_fleet_sdbk_enable_expiry_scan = fields.Boolean(
        string="Scanner les échéances chaque jour",
        help="Crée les activités de renouvellement des documents expirant bientôt.",
        config_parameter='custom_fleet_sdbk.enable_expiry_scan',
        default=True,
    )

# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

from odoo import api, fields, models


class HrEmployee(models.Model):
    _inherit = 'hr.employee'

    sdbk_document_ids = fields.One2many(
        'fleet.sdbk.document',
        'driver_id',
        string='Documents Chauffeur',
        groups='hr.group_hr_user,custom_fleet_sdbk.group_sdbk_administratif',
    )

    sdbk_expiring_document_count = fields.Integer(
        string='Documents à Renouveler',
        compute='_compute_sdbk_expiring_document_count',
        groups='hr.group_hr_user,custom_fleet_sdbk.group_sdbk_administratif',
    )

    @api.depends('sdbk_document_ids.expiry_date')
    def _compute_sdbk_expiring_document_count(self):
        for employee in self:
            employee.sdbk_expiring_document_count = len(
                employee.sdbk_document_ids.filtered(lambda d: d.alert_level in ('expire', 'a_renouveler'))
            )

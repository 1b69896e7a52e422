# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

from odoo import fields, models

from ..const import STEP_OUTCOMES


class FleetValidationHistory(models.Model):
    """Historique des décisions des services (une ligne par changement)."""
    _name = 'fleet.validation.history'
    _description = 'Historique des Validations'
    _order = 'create_date desc, id desc'

    workflow_id = fields.Many2one(
        'fleet.validation.workflow',
        string='Workflow',
        required=True,
        ondelete='cascade',
        index=True,
    )
    step_id = fields.Many2one(
        'fleet.validation.step',
        string='Étape',
        ondelete='set null',
    )
    step_type = fields.Selection(related='step_id.step_type', store=True)
    vehicle_id = fields.Many2one(related='workflow_id.vehicle_id', store=True)
    outcome = fields.Selection(STEP_OUTCOMES, string='Nouveau Statut', required=True)
    commentaire = fields.Text(string='Commentaire')
    validator_id = fields.Many2one('res.users', string='Validateur')
    validator_name = fields.Char(related='validator_id.name', string='Nom Validateur')
    validator_role = fields.Char(string='Rôle')

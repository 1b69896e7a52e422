# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

"""
Diagnostic maintenance (étape 1 du processus SDBK).
Workflow: en_cours → termine
Créé et terminé uniquement par fleet.sdbk.lifecycle.
"""

import logging

from odoo import _, api, fields, models

_logger = logging.getLogger(__name__)


class FleetMaintenanceDiagnostic(models.Model):
    _name = 'fleet.maintenance.diagnostic'
    _description = 'Diagnostic Maintenance'
    _inherit = ['fleet.sdbk.stage.mixin', 'mail.thread']
    _order = 'date_start desc, id desc'

    name = fields.Char(
        string='Référence',
        required=True,
        copy=False,
        readonly=True,
        index=True,
        default=lambda self: _('Nouveau'),
    )

    vehicle_id = fields.Many2one(
        'fleet.vehicle',
        string='Véhicule',
        required=True,
        ondelete='cascade',
        index=True,
    )

    workflow_id = fields.Many2one(
        'fleet.validation.workflow',
        string='Workflow de Validation',
        ondelete='set null',
        readonly=True,
    )

    state = fields.Selection(
        [
            ('en_cours', 'En cours'),
            ('termine', 'Terminé'),
        ],
        string='État',
        default='en_cours',
        required=True,
        tracking=True,
    )

    # ========== DIAGNOSTIC ==========

    type_panne = fields.Char(string='Type de Panne')
    description_panne = fields.Text(string='Description')
    pieces_changees = fields.Text(string='Pièces Changées')
    cout_reparation = fields.Monetary(string='Coût Réparation', currency_field='currency_id')
    currency_id = fields.Many2one(
        'res.currency',
        default=lambda self: self.env.company.currency_id,
    )
    duree_reparation_estimee = fields.Integer(string='Durée Estimée (h)')
    duree_reparation_reelle = fields.Integer(string='Durée Réelle (h)')
    technicien_nom = fields.Char(string='Technicien')
    commentaires = fields.Text(string='Commentaires')
    file_url = fields.Char(string='URL Rapport')

    date_start = fields.Datetime(
        string='Début',
        default=fields.Datetime.now,
        readonly=True,
    )
    date_end = fields.Datetime(string='Fin', readonly=True)

    @api.model_create_multi
    def create(self, vals_list):
        for vals in vals_list:
            if vals.get('name', _('Nouveau')) == _('Nouveau'):
                vals['name'] = self.env['ir.sequence'].next_by_code('fleet.maintenance.diagnostic') or _('Nouveau')
        return super().create(vals_list)

    def action_finish(self):
        """Bouton: termine le diagnostic et fait sortir le véhicule de maintenance."""
        self.ensure_one()
        self.env['fleet.sdbk.lifecycle'].finish_maintenance_diagnostic(self)
        return True

# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

import logging

from odoo import _, api, fields, models
from odoo.exceptions import UserError, ValidationError

from ..const import STEP_TYPES, VERDICT_GLOBAL_STATUS

_logger = logging.getLogger(__name__)


class FleetValidationWorkflow(models.Model):
    """
    Workflow de validation inter-services d'un véhicule.

    Un workflow porte une étape par service (maintenance, administratif,
    HSEQ, OBC). Il reste ouvert jusqu'au démarrage du cycle suivant; seul
    le plus récent détermine le statut du véhicule.
    """
    _name = 'fleet.validation.workflow'
    _description = 'Workflow de Validation Véhicule'
    _inherit = ['mail.thread']
    _order = 'create_date desc, id desc'

    name = fields.Char(
        string='Référence',
        required=True,
        copy=False,
        readonly=True,
        default=lambda self: _('Nouveau'),
    )

    vehicle_id = fields.Many2one(
        'fleet.vehicle',
        string='Véhicule',
        required=True,
        ondelete='cascade',
        index=True,
    )

    state = fields.Selection(
        [
            ('open', 'Ouvert'),
            ('closed', 'Clôturé'),
        ],
        string='État',
        default='open',
        required=True,
        tracking=True,
    )

    step_ids = fields.One2many(
        'fleet.validation.step',
        'workflow_id',
        string='Étapes',
    )

    history_ids = fields.One2many(
        'fleet.validation.history',
        'workflow_id',
        string='Historique',
    )

    global_status = fields.Selection(
        [
            ('en_validation', 'En validation'),
            ('valide', 'Validé'),
            ('rejete', 'Rejeté'),
        ],
        string='Statut Global',
        compute='_compute_global_status',
        store=True,
    )

    date_closed = fields.Datetime(string='Date Clôture', readonly=True)

    @api.depends('step_ids.outcome')
    def _compute_global_status(self):
        Aggregator = self.env['fleet.sdbk.validation.aggregator']
        for workflow in self:
            verdict = Aggregator.aggregate(workflow.step_ids.mapped('outcome'))
            workflow.global_status = VERDICT_GLOBAL_STATUS[verdict]

    @api.constrains('vehicle_id', 'state')
    def _check_single_open(self):
        for workflow in self.filtered(lambda w: w.state == 'open'):
            count = self.search_count([
                ('vehicle_id', '=', workflow.vehicle_id.id),
                ('state', '=', 'open'),
            ])
            if count > 1:
                raise ValidationError(_(
                    "Le véhicule %s a déjà un workflow de validation ouvert.",
                    workflow.vehicle_id.display_name,
                ))

    @api.model_create_multi
    def create(self, vals_list):
        """Numérote le workflow et crée une étape en attente par service."""
        for vals in vals_list:
            if vals.get('name', _('Nouveau')) == _('Nouveau'):
                vals['name'] = self.env['ir.sequence'].next_by_code('fleet.validation.workflow') or _('Nouveau')
            if not vals.get('step_ids'):
                vals['step_ids'] = [
                    fields.Command.create({'step_type': step_type})
                    for step_type, _label in STEP_TYPES
                ]
        return super().create(vals_list)

    def unlink(self):
        if any(workflow.history_ids for workflow in self):
            raise UserError(_("Un workflow comportant des validations ne peut pas être supprimé."))
        return super().unlink()

    # ========== MÉTHODES MÉTIER ==========

    @api.model
    def _open_for_vehicle(self, vehicle):
        """Clôture le workflow ouvert du véhicule et en ouvre un nouveau."""
        previous = vehicle._get_open_workflow()
        if previous:
            previous.action_close()
        workflow = self.create({'vehicle_id': vehicle.id})
        _logger.info("Validation workflow %s opened for vehicle %s", workflow.name, vehicle.display_name)
        return workflow

    def action_close(self):
        for workflow in self.filtered(lambda w: w.state == 'open'):
            workflow.write({'state': 'closed', 'date_closed': fields.Datetime.now()})
        return True

    def _get_step(self, step_type):
        self.ensure_one()
        step = self.step_ids.filtered(lambda s: s.step_type == step_type)
        if not step:
            raise UserError(_(
                "Le workflow %(workflow)s n'a pas d'étape %(step)s.",
                workflow=self.name, step=step_type,
            ))
        return step[:1]

    @api.model
    def get_validation_statistics(self):
        """Répartition des workflows par statut global."""
        stats = {'total': 0, 'en_validation': 0, 'valide': 0, 'rejete': 0}
        groups = self.sudo()._read_group([], groupby=['global_status'], aggregates=['__count'])
        for status, count in groups:
            stats['total'] += count
            if status in stats:
                stats[status] = count
        return stats

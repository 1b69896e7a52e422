# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

import logging

from odoo import _, api, fields, models
from odoo.exceptions import AccessError, UserError, ValidationError

from ..const import STEP_OUTCOMES, STEP_TYPES

_logger = logging.getLogger(__name__)

DECISION_FIELDS = ('outcome', 'commentaire', 'date_validation', 'validator_id')


class FleetValidationStep(models.Model):
    _name = 'fleet.validation.step'
    _description = 'Étape de Validation'
    _order = 'workflow_id, id'

    workflow_id = fields.Many2one(
        'fleet.validation.workflow',
        string='Workflow',
        required=True,
        ondelete='cascade',
        index=True,
    )

    vehicle_id = fields.Many2one(
        related='workflow_id.vehicle_id',
        store=True,
    )

    step_type = fields.Selection(
        STEP_TYPES,
        string='Service',
        required=True,
    )

    outcome = fields.Selection(
        STEP_OUTCOMES,
        string='Statut',
        default='en_attente',
        required=True,
    )

    commentaire = fields.Text(string='Commentaire')
    date_validation = fields.Datetime(string='Date Validation', readonly=True)
    validator_id = fields.Many2one('res.users', string='Validé par', readonly=True)

    @api.constrains('workflow_id', 'step_type')
    def _check_unique_step_type(self):
        for step in self:
            duplicates = step.workflow_id.step_ids.filtered(lambda s: s.step_type == step.step_type)
            if len(duplicates) > 1:
                raise ValidationError(_("Le workflow a déjà une étape %s.", step.step_type))

    def write(self, vals):
        if any(step.workflow_id.state == 'closed' for step in self):
            raise UserError(_("Les étapes d'un workflow clôturé ne peuvent plus être modifiées."))
        if not self.env.su and any(field in vals for field in DECISION_FIELDS):
            raise AccessError(_(
                "La décision d'une étape passe par les actions Valider ou Rejeter du service concerné."
            ))
        return super().write(vals)

    # ========== MÉTHODES MÉTIER ==========

    def _set_outcome(self, outcome, comment=None):
        """Enregistre la décision du service et l'historise.

        Ne synchronise pas le statut du véhicule: c'est à l'appelant de le faire.
        """
        self.ensure_one()
        user = self.env.user
        self.write({
            'outcome': outcome,
            'commentaire': comment or False,
            'date_validation': fields.Datetime.now(),
            'validator_id': user.id,
        })
        self.env['fleet.validation.history'].sudo().create({
            'workflow_id': self.workflow_id.id,
            'step_id': self.id,
            'outcome': outcome,
            'commentaire': comment or False,
            'validator_id': user.id,
            'validator_role': self.env['fleet.sdbk.access'].get_user_role_label(user),
        })
        _logger.info(
            "Validation step %s of %s set to %s by %s",
            self.step_type, self.workflow_id.name, outcome, user.login,
        )
        return True

    def _apply_decision(self, outcome, comment=None):
        self.ensure_one()
        self.env['fleet.sdbk.access'].check_capability(self.step_type)
        step = self.sudo()
        vehicle = step.vehicle_id
        StatusSync = self.env['fleet.sdbk.status.sync']
        StatusSync.lock_vehicle(vehicle)
        with self.env.cr.savepoint():
            step._set_outcome(outcome, comment=comment)
            StatusSync.synchronize(vehicle)
        return True

    def action_validate(self, comment=None):
        """Validation du service, hors parcours du processus."""
        return self._apply_decision('valide', comment)

    def action_reject(self, comment=None):
        if not comment:
            raise UserError(_("Un commentaire est obligatoire pour rejeter une étape."))
        return self._apply_decision('rejete', comment)

# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

import logging

from odoo import _, api, models
from odoo.exceptions import ValidationError

from ..const import (
    STEP_OUTCOMES,
    VERDICT_APPROVED,
    VERDICT_PENDING,
    VERDICT_REJECTED,
)
from ..exceptions import NoWorkflowError

_logger = logging.getLogger(__name__)

VALID_OUTCOMES = {key for key, _label in STEP_OUTCOMES}


class FleetSdbkValidationAggregator(models.AbstractModel):
    """Combine per-department step outcomes into a workflow verdict.

    Rejection dominates: a single rejecting department blocks the vehicle
    whatever the other departments decided.
    """

    _name = "fleet.sdbk.validation.aggregator"
    _description = "Agrégation des étapes de validation"

    @api.model
    def aggregate(self, outcomes):
        """Return REJECTED, APPROVED or PENDING for a list of step outcomes.

        An empty list is PENDING: nothing has been approved yet.
        """
        outcomes = list(outcomes)
        unknown = set(outcomes) - VALID_OUTCOMES
        if unknown:
            raise ValidationError(_(
                "Statut d'étape inconnu: %s", ', '.join(sorted(map(str, unknown)))
            ))
        if 'rejete' in outcomes:
            return VERDICT_REJECTED
        if outcomes and all(outcome == 'valide' for outcome in outcomes):
            return VERDICT_APPROVED
        return VERDICT_PENDING

    @api.model
    def get_latest_workflow(self, vehicle):
        """Most recently created workflow of ``vehicle``, with its steps."""
        vehicle.ensure_one()
        workflow = self.env['fleet.validation.workflow'].sudo().search(
            [('vehicle_id', '=', vehicle.id)],
            order='create_date desc, id desc',
            limit=1,
        )
        if not workflow:
            raise NoWorkflowError(_(
                "Aucun workflow de validation trouvé pour le véhicule %s.",
                vehicle.display_name,
            ))
        return workflow

    @api.model
    def compute_verdict(self, vehicle):
        workflow = self.get_latest_workflow(vehicle)
        return self.aggregate(workflow.step_ids.mapped('outcome'))

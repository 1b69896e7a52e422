# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

"""Vehicle status synchronization.

Single writer of the (sdbk_status, validation_requise) pair of fleet.vehicle:
- lock the vehicle row (one synchronization per vehicle at a time)
- read the latest validation workflow and aggregate its steps
- write both fields together, inside a savepoint

Verdict mapping:
- REJECTED -> indisponible, validation_requise = False
- APPROVED -> disponible, validation_requise = False
- PENDING  -> validation_requise, validation_requise = True
"""
import logging

import psycopg2

from odoo import _, api, fields, models
from odoo.tools import SQL

from ..const import CTX_STATUS_SYNC, VERDICT_STATUS_MAP
from ..exceptions import InconsistentStateError, NoWorkflowError, TransientError

_logger = logging.getLogger(__name__)


class FleetSdbkStatusSync(models.AbstractModel):
    _name = "fleet.sdbk.status.sync"
    _description = "Synchronisation du statut véhicule"

    # -------------------------------------------------------------------------
    # LOCKING
    # -------------------------------------------------------------------------
    @api.model
    def lock_vehicle(self, vehicle):
        """Take the row lock of ``vehicle`` for the rest of the transaction.

        A vehicle already locked (or modified) by a concurrent transaction
        raises TransientError; the operator retries the action.
        """
        vehicle.ensure_one()
        try:
            with self.env.cr.savepoint(flush=False):
                self.env.cr.execute(SQL(
                    "SELECT id FROM fleet_vehicle WHERE id = %s FOR UPDATE NOWAIT",
                    vehicle.id,
                ))
        except psycopg2.OperationalError as e:
            _logger.warning(
                "Vehicle %s is locked by another operation: %s", vehicle.id, str(e)
            )
            raise TransientError(_(
                "Le véhicule %s est en cours de modification par une autre opération. "
                "Veuillez réessayer.",
                vehicle.display_name,
            )) from e
        return True

    # -------------------------------------------------------------------------
    # SYNCHRONIZATION
    # -------------------------------------------------------------------------
    @api.model
    def get_status_for_verdict(self, verdict):
        return VERDICT_STATUS_MAP[verdict]

    @api.model
    def is_consistent(self, status, validation_requise):
        return (status, bool(validation_requise)) in VERDICT_STATUS_MAP.values()

    @api.model
    def synchronize(self, vehicle):
        """Recompute and persist the canonical status of ``vehicle``.

        Raises:
            NoWorkflowError: no validation workflow, nothing is written
            TransientError: lock or write failure, nothing is written

        Returns:
            str: the new status
        """
        vehicle.ensure_one()
        vehicle = vehicle.sudo()
        self.lock_vehicle(vehicle)

        Aggregator = self.env['fleet.sdbk.validation.aggregator']
        workflow = Aggregator.get_latest_workflow(vehicle)
        verdict = Aggregator.aggregate(workflow.step_ids.mapped('outcome'))
        status, validation_requise = self.get_status_for_verdict(verdict)

        previous = vehicle.sdbk_status
        self._write_status(vehicle, status, validation_requise)

        if previous != status:
            _logger.info(
                "Vehicle %s status synchronized: %s -> %s (workflow %s, verdict %s)",
                vehicle.display_name, previous, status, workflow.name, verdict,
            )
        return status

    def _write_status(self, vehicle, status, validation_requise):
        # Always touch the row: a concurrent synchronization that read an
        # older step set then fails on its own lock instead of overwriting.
        vals = {
            'sdbk_status': status,
            'validation_requise': validation_requise,
            'status_synced_at': fields.Datetime.now(),
        }
        try:
            with self.env.cr.savepoint():
                vehicle.with_context(**{CTX_STATUS_SYNC: True}).write(vals)
                vehicle.flush_recordset()
        except psycopg2.OperationalError as e:
            _logger.warning(
                "Status write failed for vehicle %s: %s", vehicle.id, str(e)
            )
            raise TransientError(_(
                "La mise à jour du statut du véhicule %s a échoué. Veuillez réessayer.",
                vehicle.display_name,
            )) from e

    @api.model
    def ensure_consistent(self, vehicle):
        """Return the stored (status, validation_requise) pair of ``vehicle``.

        An inconsistent pair is never trusted: a synchronization is forced
        first. Without workflow to synchronize from, InconsistentStateError
        is raised.
        """
        vehicle.ensure_one()
        vehicle = vehicle.sudo()
        if self.is_consistent(vehicle.sdbk_status, vehicle.validation_requise):
            return vehicle.sdbk_status, vehicle.validation_requise

        _logger.warning(
            "Inconsistent status on vehicle %s: status=%s validation_requise=%s",
            vehicle.display_name, vehicle.sdbk_status, vehicle.validation_requise,
        )
        try:
            self.synchronize(vehicle)
        except NoWorkflowError as e:
            raise InconsistentStateError(_(
                "Le statut du véhicule %s est incohérent (%s / validation requise: %s) "
                "et aucun workflow ne permet de le recalculer.",
                vehicle.display_name, vehicle.sdbk_status, vehicle.validation_requise,
            )) from e
        return vehicle.sdbk_status, vehicle.validation_requise

    @api.model
    def synchronize_many(self, vehicles):
        """Batch synchronization for crons: one failure does not stop the batch."""
        result = {'synced': 0, 'no_workflow': 0, 'failed': 0}
        for vehicle in vehicles:
            try:
                self.synchronize(vehicle)
                result['synced'] += 1
            except NoWorkflowError:
                result['no_workflow'] += 1
            except TransientError as e:
                _logger.warning("Synchronization skipped for %s: %s", vehicle.display_name, str(e))
                result['failed'] += 1
        _logger.info(
            "Status synchronization batch: %d synced, %d without workflow, %d failed",
            result['synced'], result['no_workflow'], result['failed'],
        )
        return result

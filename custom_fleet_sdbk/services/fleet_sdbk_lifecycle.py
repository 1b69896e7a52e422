# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

"""Processus SDBK lifecycle orchestrator.

Workflow: Retour maintenance → Maintenance en cours → Sorti de maintenance →
Vérification administrative → Contrôle OBC → Contrôle HSSE → Disponible →
En mission → Retour maintenance

Any failed control sends the vehicle to Bloqué. Leaving Bloqué is a manual
override (fleet.vehicle.action_admin_unblock), not a transition of this
service.

Each entry point:
- checks the caller's capability
- locks the vehicle and checks the source state
- creates/updates the stage record and the department's validation step
- writes the new lifecycle state
- synchronizes the canonical vehicle status
all inside one savepoint.
"""
import logging
from contextlib import contextmanager

import psycopg2

from odoo import _, api, fields, models
from odoo.exceptions import UserError

from ..const import (
    CTX_LIFECYCLE,
    ENTRY_POINT_SOURCES,
    LEGAL_TRANSITIONS,
    PROCESS_STATES,
)
from ..exceptions import IllegalTransitionError, NoWorkflowError, TransientError

_logger = logging.getLogger(__name__)


class FleetSdbkLifecycle(models.AbstractModel):
    _name = "fleet.sdbk.lifecycle"
    _description = "Orchestrateur du processus SDBK"

    # -------------------------------------------------------------------------
    # TRANSITION HELPERS
    # -------------------------------------------------------------------------
    @api.model
    def _state_label(self, state):
        return dict(PROCESS_STATES).get(state, state)

    @api.model
    def check_transition(self, vehicle, entry_point, target=None):
        """Raise IllegalTransitionError unless ``entry_point`` may run on
        ``vehicle`` in its current state (and move it to ``target``)."""
        source = ENTRY_POINT_SOURCES.get(entry_point)
        if source is None:
            raise IllegalTransitionError(_("Étape du processus inconnue: %s", entry_point))
        current = vehicle.process_state
        if current != source or (target and (source, target) not in LEGAL_TRANSITIONS):
            raise IllegalTransitionError(_(
                "Transition impossible pour le véhicule %(vehicle)s: l'action requiert "
                "l'état « %(source)s » mais le véhicule est « %(current)s ».",
                vehicle=vehicle.display_name,
                source=self._state_label(source),
                current=self._state_label(current),
            ))
        return True

    def _prepare(self, vehicle, entry_point, capability):
        vehicle.ensure_one()
        self.env['fleet.sdbk.access'].check_capability(capability)
        vehicle = vehicle.with_env(self.env).sudo()
        self.env['fleet.sdbk.status.sync'].lock_vehicle(vehicle)
        self.check_transition(vehicle, entry_point)
        return vehicle

    def _stage_records(self, records):
        return records.with_env(self.env).sudo().with_context(**{CTX_LIFECYCLE: True})

    @contextmanager
    def _atomic(self, vehicle):
        try:
            with self.env.cr.savepoint():
                yield
        except psycopg2.OperationalError as e:
            _logger.warning(
                "Lifecycle operation failed on vehicle %s: %s", vehicle.id, str(e)
            )
            raise TransientError(_(
                "L'opération sur le véhicule %s a échoué. Veuillez réessayer.",
                vehicle.display_name,
            )) from e

    def _set_state(self, vehicle, entry_point, target):
        self.check_transition(vehicle, entry_point, target)
        previous = vehicle.process_state
        vehicle.with_context(**{CTX_LIFECYCLE: True}).write({
            'process_state': target,
            'process_state_date': fields.Datetime.now(),
        })
        self.env['fleet.sdbk.notifier'].notify(
            vehicle,
            _("Processus SDBK: %(source)s → %(target)s",
              source=self._state_label(previous),
              target=self._state_label(target)),
            level='warning' if target == 'bloque' else 'info',
            subject=_("Processus SDBK"),
        )

    def _record_step(self, vehicle, step_type, approved, comment=None):
        """Record the department outcome on the open workflow, if any."""
        workflow = vehicle._get_open_workflow()
        if not workflow:
            _logger.warning(
                "No open validation workflow for vehicle %s, step %s not recorded",
                vehicle.display_name, step_type,
            )
            return False
        step = workflow._get_step(step_type)
        step._set_outcome('valide' if approved else 'rejete', comment=comment)
        return step

    def _synchronize(self, vehicle):
        try:
            return self.env['fleet.sdbk.status.sync'].synchronize(vehicle)
        except NoWorkflowError as e:
            # Vehicles without validation history keep their status
            self.env['fleet.sdbk.notifier'].notify(vehicle, str(e), level='warning')
            return False

    # -------------------------------------------------------------------------
    # ÉTAPE 1: MAINTENANCE
    # -------------------------------------------------------------------------
    @api.model
    def start_maintenance_diagnostic(self, vehicle, vals=None):
        """retour_maintenance → maintenance_en_cours

        Opens a new validation workflow (closing the previous one) and
        creates the maintenance diagnostic.
        """
        vehicle = self._prepare(vehicle, 'start_maintenance_diagnostic', 'maintenance')
        with self._atomic(vehicle):
            workflow = self.env['fleet.validation.workflow'].sudo()._open_for_vehicle(vehicle)
            diagnostic_vals = dict(vals or {})
            diagnostic_vals.update({
                'vehicle_id': vehicle.id,
                'workflow_id': workflow.id,
                'state': 'en_cours',
            })
            diagnostic = self.env['fleet.maintenance.diagnostic'].sudo().create(diagnostic_vals)
            self._set_state(vehicle, 'start_maintenance_diagnostic', 'maintenance_en_cours')
            self._synchronize(vehicle)
        return diagnostic

    @api.model
    def finish_maintenance_diagnostic(self, diagnostic, vals=None, comment=None):
        """maintenance_en_cours → disponible_maintenance"""
        diagnostic.ensure_one()
        vehicle = self._prepare(
            diagnostic.vehicle_id, 'finish_maintenance_diagnostic', 'maintenance'
        )
        diagnostic = self._stage_records(diagnostic)
        if diagnostic.state != 'en_cours':
            raise UserError(_(
                "Le diagnostic %s n'est pas en cours.", diagnostic.name
            ))
        with self._atomic(vehicle):
            diagnostic_vals = dict(vals or {})
            diagnostic_vals.update({
                'state': 'termine',
                'date_end': fields.Datetime.now(),
            })
            diagnostic.write(diagnostic_vals)
            self._record_step(vehicle, 'maintenance', True, comment=comment or diagnostic.commentaires)
            self._set_state(vehicle, 'finish_maintenance_diagnostic', 'disponible_maintenance')
            self._synchronize(vehicle)
        return diagnostic

    # -------------------------------------------------------------------------
    # ÉTAPE 2: VÉRIFICATION ADMINISTRATIVE
    # -------------------------------------------------------------------------
    @api.model
    def send_to_admin_review(self, vehicle):
        """disponible_maintenance → verification_admin"""
        vehicle = self._prepare(vehicle, 'send_to_admin_review', 'maintenance')
        with self._atomic(vehicle):
            self._set_state(vehicle, 'send_to_admin_review', 'verification_admin')
        return vehicle

    @api.model
    def finish_admin_check(self, vehicle, conforme, comment=None):
        """verification_admin → controle_obc (conforme) / bloque"""
        vehicle = self._prepare(vehicle, 'finish_admin_check', 'administratif')
        target = 'controle_obc' if conforme else 'bloque'
        with self._atomic(vehicle):
            expired = vehicle.sdbk_document_ids.filtered(lambda d: d.alert_level == 'expire')
            if conforme and expired:
                self.env['fleet.sdbk.notifier'].notify(
                    vehicle,
                    _("Vérification administrative validée malgré %(count)d document(s) expiré(s): %(docs)s",
                      count=len(expired), docs=', '.join(expired.mapped('display_name'))),
                    level='warning',
                )
            self._record_step(vehicle, 'administratif', conforme, comment=comment)
            self._set_state(vehicle, 'finish_admin_check', target)
            self._synchronize(vehicle)
        return target

    # -------------------------------------------------------------------------
    # ÉTAPE 3: CONTRÔLE OBC
    # -------------------------------------------------------------------------
    @api.model
    def finish_obc_control(self, vehicle, conforme, safe_to_load_valide, vals=None):
        """controle_obc → controle_hsse (conforme and safe to load) / bloque"""
        vehicle = self._prepare(vehicle, 'finish_obc_control', 'obc')
        passed = bool(conforme and safe_to_load_valide)
        target = 'controle_hsse' if passed else 'bloque'
        with self._atomic(vehicle):
            control_vals = dict(vals or {})
            control_vals.update({
                'conforme': bool(conforme),
                'safe_to_load_valide': bool(safe_to_load_valide),
                'state': 'termine',
            })
            control = self._stage_records(self.env['fleet.control.obc'])._create_or_update_open(vehicle, control_vals)
            self._record_step(vehicle, 'obc', passed, comment=control.commentaires)
            self._set_state(vehicle, 'finish_obc_control', target)
            self._synchronize(vehicle)
        return control

    # -------------------------------------------------------------------------
    # ÉTAPE 4: CONTRÔLE HSSE
    # -------------------------------------------------------------------------
    @api.model
    def finish_hsse_control(self, vehicle, conforme, points_bloquants=None, vals=None):
        """controle_hsse → disponible (conforme) / bloque"""
        vehicle = self._prepare(vehicle, 'finish_hsse_control', 'hseq')
        target = 'disponible' if conforme else 'bloque'
        with self._atomic(vehicle):
            control_vals = dict(vals or {})
            control_vals.update({
                'conforme': bool(conforme),
                'points_bloquants': '\n'.join(points_bloquants or []) or False,
                'state': 'termine',
            })
            control = self._stage_records(self.env['fleet.control.hsse'])._create_or_update_open(vehicle, control_vals)
            comment = control.commentaires
            if points_bloquants:
                comment = _("Points bloquants: %s", ', '.join(points_bloquants))
            self._record_step(vehicle, 'hseq', conforme, comment=comment)
            self._set_state(vehicle, 'finish_hsse_control', target)
            self._synchronize(vehicle)
        return control

    # -------------------------------------------------------------------------
    # ÉTAPE 5: ÉMISSION DU BON DE LIVRAISON
    # -------------------------------------------------------------------------
    @api.model
    def issue_delivery_order(self, vehicle, vals):
        """disponible → en_mission"""
        vehicle = self._prepare(vehicle, 'issue_delivery_order', 'dispatch')
        status, _validation_requise = self.env['fleet.sdbk.status.sync'].ensure_consistent(vehicle)
        if status != 'disponible':
            raise IllegalTransitionError(_(
                "Le véhicule %s n'est pas validé pour une mission (statut: %s).",
                vehicle.display_name, status,
            ))
        with self._atomic(vehicle):
            order_vals = dict(vals or {})
            order_vals.update({
                'vehicle_id': vehicle.id,
                'state': 'emis',
            })
            order_vals.setdefault('driver_id', vehicle.sdbk_driver_id.id or False)
            order = self.env['fleet.delivery.order'].sudo().create(order_vals)
            self._set_state(vehicle, 'issue_delivery_order', 'en_mission')
        return order

    # -------------------------------------------------------------------------
    # ÉTAPE 6: RETOUR DE MISSION
    # -------------------------------------------------------------------------
    @api.model
    def close_delivery_order(self, order, return_vals=None):
        """en_mission → retour_maintenance (loops back to the first stage)"""
        order.ensure_one()
        vehicle = self._prepare(order.vehicle_id, 'close_delivery_order', 'dispatch')
        order = self._stage_records(order)
        if order.state != 'emis':
            raise UserError(_("Le bon de livraison %s est déjà clôturé.", order.name))
        with self._atomic(vehicle):
            order_vals = dict(return_vals or {})
            order_vals['state'] = 'livre'
            order.write(order_vals)
            self._set_state(vehicle, 'close_delivery_order', 'retour_maintenance')
        return order

    # -------------------------------------------------------------------------
    # STATISTIQUES
    # -------------------------------------------------------------------------
    @api.model
    def get_process_statistics(self):
        """Number of vehicles per lifecycle state (every state present)."""
        stats = {state: 0 for state, _label in PROCESS_STATES}
        groups = self.env['fleet.vehicle'].sudo()._read_group(
            [('process_state', '!=', False)],
            groupby=['process_state'],
            aggregates=['__count'],
        )
        for state, count in groups:
            if state in stats:
                stats[state] = count
        return stats

# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

from odoo.exceptions import AccessError, UserError
from odoo.tests import tagged

from .common import SdbkCommon


@tagged('post_install', '-at_install', 'sdbk', 'sdbk_security')
class TestSdbkSecurity(SdbkCommon):
    """Each department only performs its own stage."""

    def setUp(self):
        super().setUp()
        self.vehicle = self._create_vehicle()

    def test_capabilities(self):
        Access = self.env['fleet.sdbk.access']
        self.assertTrue(Access.has_capability('maintenance', self.maintenance_user))
        self.assertFalse(Access.has_capability('obc', self.maintenance_user))
        self.assertTrue(Access.has_capability('dispatch', self.transport_user))
        self.assertFalse(Access.has_capability('override', self.transport_user))
        for capability in ('maintenance', 'administratif', 'hseq', 'obc', 'dispatch', 'override'):
            self.assertTrue(Access.has_capability(capability, self.manager_user), capability)
            self.assertFalse(Access.has_capability(capability, self.basic_user), capability)
        self.assertFalse(Access.has_capability('unknown', self.manager_user))

    def test_departments_run_their_stage(self):
        diagnostic = self.Lifecycle.with_user(self.maintenance_user).start_maintenance_diagnostic(self.vehicle)
        self.Lifecycle.with_user(self.maintenance_user).finish_maintenance_diagnostic(diagnostic)
        self.Lifecycle.with_user(self.maintenance_user).send_to_admin_review(self.vehicle)
        self.Lifecycle.with_user(self.admin_user).finish_admin_check(self.vehicle, True)
        self.Lifecycle.with_user(self.obc_user).finish_obc_control(self.vehicle, True, True)
        self.Lifecycle.with_user(self.hseq_user).finish_hsse_control(self.vehicle, True)
        self.assertEqual(self.vehicle.sdbk_status, 'disponible')

        order = self.Lifecycle.with_user(self.transport_user).issue_delivery_order(self.vehicle, {
            'client_nom': 'Station Matoto',
            'destination': 'Kindia',
        })
        self.assertEqual(self.vehicle.process_state, 'en_mission')
        self.Lifecycle.with_user(self.transport_user).close_delivery_order(order)
        self.assertEqual(self.vehicle.process_state, 'retour_maintenance')

        workflow = self.vehicle.validation_workflow_ids[:1]
        history = workflow.history_ids.filtered(lambda h: h.step_type == 'obc')
        self.assertEqual(history.validator_id, self.obc_user)
        self.assertEqual(history.validator_role, 'obc')

    def test_wrong_department_refused(self):
        with self.assertRaises(AccessError):
            self.Lifecycle.with_user(self.obc_user).start_maintenance_diagnostic(self.vehicle)
        self.assertEqual(self.vehicle.process_state, 'retour_maintenance')

        diagnostic = self.Lifecycle.with_user(self.maintenance_user).start_maintenance_diagnostic(self.vehicle)
        self.Lifecycle.with_user(self.maintenance_user).finish_maintenance_diagnostic(diagnostic)
        self.Lifecycle.with_user(self.maintenance_user).send_to_admin_review(self.vehicle)
        with self.assertRaises(AccessError):
            self.Lifecycle.with_user(self.maintenance_user).finish_admin_check(self.vehicle, True)
        with self.assertRaises(AccessError):
            self.Lifecycle.with_user(self.basic_user).finish_admin_check(self.vehicle, True)
        self.assertEqual(self.vehicle.process_state, 'verification_admin')

    def test_step_validation_requires_department(self):
        workflow = self.Workflow._open_for_vehicle(self.vehicle)
        step = workflow._get_step('hseq')
        with self.assertRaises(AccessError):
            step.with_user(self.admin_user).action_validate()
        step.with_user(self.hseq_user).action_validate()
        self.assertEqual(step.outcome, 'valide')

    def test_unblock_reserved_to_manager(self):
        diagnostic = self.Lifecycle.start_maintenance_diagnostic(self.vehicle)
        self.Lifecycle.finish_maintenance_diagnostic(diagnostic)
        self.Lifecycle.send_to_admin_review(self.vehicle)
        self.Lifecycle.finish_admin_check(self.vehicle, False)
        with self.assertRaises(AccessError):
            self.vehicle.with_user(self.admin_user).action_admin_unblock('Dossier complété')
        self.assertEqual(self.vehicle.process_state, 'bloque')

    def test_step_outcome_write_refused(self):
        workflow = self.Workflow._open_for_vehicle(self.vehicle)
        step = workflow._get_step('hseq')
        with self.assertRaises(AccessError):
            step.with_user(self.admin_user).write({'outcome': 'valide'})
        with self.assertRaises(AccessError):
            step.with_user(self.hseq_user).write({'outcome': 'rejete'})
        # Managers decide through the step actions too
        with self.assertRaises(AccessError):
            step.with_user(self.manager_user).write({'commentaire': 'Validé par téléphone'})
        self.assertEqual(step.outcome, 'en_attente')
        self.assertFalse(workflow.history_ids)

    def test_status_context_requires_service(self):
        vehicle = self.Vehicle.browse(self.vehicle.id)
        for user in (self.transport_user, self.manager_user):
            with self.assertRaises(UserError):
                vehicle.with_user(user).with_context(sdbk_status_sync=True).write({
                    'sdbk_status': 'disponible',
                    'validation_requise': False,
                })
            with self.assertRaises(UserError):
                vehicle.with_user(user).with_context(sdbk_lifecycle=True).write({
                    'process_state': 'disponible',
                })
        self.assertEqual(self.vehicle.sdbk_status, 'validation_requise')
        self.assertEqual(self.vehicle.process_state, 'retour_maintenance')

    def test_stage_state_write_refused(self):
        diagnostic = self.Lifecycle.start_maintenance_diagnostic(self.vehicle)
        Diagnostic = self.env['fleet.maintenance.diagnostic']
        with self.assertRaises(UserError):
            Diagnostic.browse(diagnostic.id).with_user(self.maintenance_user).write({'state': 'termine'})
        with self.assertRaises(UserError):
            Diagnostic.browse(diagnostic.id).with_context(sdbk_lifecycle=True).with_user(self.maintenance_user).write({
                'state': 'termine',
            })
        # Other fields stay editable by the department
        Diagnostic.browse(diagnostic.id).with_user(self.maintenance_user).write({'pieces_changees': 'Filtre à huile'})
        self.Lifecycle.finish_maintenance_diagnostic(diagnostic)
        self.assertEqual(self.vehicle.process_state, 'disponible_maintenance')

        self.Lifecycle.send_to_admin_review(self.vehicle)
        self.Lifecycle.finish_admin_check(self.vehicle, True)
        self.Lifecycle.finish_obc_control(self.vehicle, True, True)
        self.Lifecycle.finish_hsse_control(self.vehicle, True)
        order = self.Lifecycle.issue_delivery_order(self.vehicle, {
            'client_nom': 'Station Dixinn',
            'destination': 'Boké',
        })
        Order = self.env['fleet.delivery.order']
        with self.assertRaises(UserError):
            Order.browse(order.id).with_user(self.transport_user).write({'state': 'livre'})
        with self.assertRaises(UserError):
            Order.browse(order.id).write({'state': 'livre'})
        self.assertEqual(order.state, 'emis')

        # The vehicle can still come back from its mission
        self.Lifecycle.with_user(self.transport_user).close_delivery_order(order)
        self.assertEqual(order.state, 'livre')
        self.assertEqual(self.vehicle.process_state, 'retour_maintenance')

# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

from odoo.tests import TransactionCase


class SdbkCommon(TransactionCase):
    """Shared fixtures: one vehicle model, one user per SDBK department."""

    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.env = cls.env(context=dict(cls.env.context, tracking_disable=True))

        cls.Vehicle = cls.env['fleet.vehicle']
        cls.Workflow = cls.env['fleet.validation.workflow']
        cls.Document = cls.env['fleet.sdbk.document']
        cls.Aggregator = cls.env['fleet.sdbk.validation.aggregator']
        cls.StatusSync = cls.env['fleet.sdbk.status.sync']
        cls.Lifecycle = cls.env['fleet.sdbk.lifecycle']
        cls.Expiry = cls.env['fleet.sdbk.expiry.service']

        cls.brand = cls.env['fleet.vehicle.model.brand'].create({
            'name': 'Test Brand SDBK',
        })
        cls.vehicle_model = cls.env['fleet.vehicle.model'].create({
            'name': 'Test Model SDBK',
            'brand_id': cls.brand.id,
        })
        cls.driver = cls.env['hr.employee'].create({
            'name': 'Chauffeur Test SDBK',
        })

        cls.maintenance_user = cls._create_user('maintenance')
        cls.admin_user = cls._create_user('administratif')
        cls.obc_user = cls._create_user('obc')
        cls.hseq_user = cls._create_user('hseq')
        cls.transport_user = cls._create_user('transport')
        cls.manager_user = cls._create_user('manager')
        cls.basic_user = cls.env['res.users'].create({
            'name': 'SDBK Basic User',
            'login': 'sdbk_basic_user',
            'email': 'sdbk_basic@test.com',
            'group_ids': [(6, 0, [cls.env.ref('base.group_user').id])],
        })

    @classmethod
    def _create_user(cls, department):
        return cls.env['res.users'].create({
            'name': f'SDBK {department.capitalize()} User',
            'login': f'sdbk_{department}_user',
            'email': f'sdbk_{department}@test.com',
            'group_ids': [(6, 0, [
                cls.env.ref('base.group_user').id,
                cls.env.ref(f'custom_fleet_sdbk.group_sdbk_{department}').id,
            ])],
        })

    def _create_vehicle(self, plate='SDBK-001', **kwargs):
        vals = {
            'model_id': self.vehicle_model.id,
            'license_plate': plate,
            'sdbk_driver_id': self.driver.id,
        }
        vals.update(kwargs)
        return self.Vehicle.create(vals)

    def _set_outcomes(self, workflow, **outcomes):
        """Set step outcomes by department, e.g. maintenance='valide'."""
        for step_type, outcome in outcomes.items():
            workflow._get_step(step_type)._set_outcome(outcome)

    def _run_to_available(self, vehicle):
        """Drive ``vehicle`` through every stage up to 'disponible'."""
        diagnostic = self.Lifecycle.start_maintenance_diagnostic(vehicle, {'type_panne': 'Vidange'})
        self.Lifecycle.finish_maintenance_diagnostic(diagnostic)
        self.Lifecycle.send_to_admin_review(vehicle)
        self.Lifecycle.finish_admin_check(vehicle, True)
        self.Lifecycle.finish_obc_control(vehicle, True, True)
        self.Lifecycle.finish_hsse_control(vehicle, True)
        return diagnostic

# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

from itertools import product

from odoo.exceptions import ValidationError
from odoo.tests import tagged

from odoo.addons.custom_fleet_sdbk.const import (
    VERDICT_APPROVED,
    VERDICT_PENDING,
    VERDICT_REJECTED,
)
from odoo.addons.custom_fleet_sdbk.exceptions import NoWorkflowError

from .common import SdbkCommon

OUTCOMES = ('en_attente', 'valide', 'rejete')


@tagged('post_install', '-at_install', 'sdbk')
class TestValidationAggregator(SdbkCommon):

    def test_rejection_dominates(self):
        """Every combination of four steps: one rejection is enough to reject."""
        for outcomes in product(OUTCOMES, repeat=4):
            verdict = self.Aggregator.aggregate(outcomes)
            if 'rejete' in outcomes:
                self.assertEqual(verdict, VERDICT_REJECTED, outcomes)
            elif all(outcome == 'valide' for outcome in outcomes):
                self.assertEqual(verdict, VERDICT_APPROVED, outcomes)
            else:
                self.assertEqual(verdict, VERDICT_PENDING, outcomes)

    def test_order_does_not_matter(self):
        self.assertEqual(
            self.Aggregator.aggregate(['rejete', 'valide', 'valide', 'valide']),
            self.Aggregator.aggregate(['valide', 'valide', 'valide', 'rejete']),
        )

    def test_empty_is_pending(self):
        self.assertEqual(self.Aggregator.aggregate([]), VERDICT_PENDING)

    def test_unknown_outcome(self):
        with self.assertRaises(ValidationError):
            self.Aggregator.aggregate(['valide', 'peut-etre'])

    def test_workflow_creates_pending_steps(self):
        vehicle = self._create_vehicle()
        workflow = self.Workflow.create({'vehicle_id': vehicle.id})
        self.assertEqual(
            sorted(workflow.step_ids.mapped('step_type')),
            ['administratif', 'hseq', 'maintenance', 'obc'],
        )
        self.assertEqual(set(workflow.step_ids.mapped('outcome')), {'en_attente'})
        self.assertEqual(workflow.global_status, 'en_validation')
        self.assertTrue(workflow.name.startswith('VAL-'))

    def test_global_status_follows_steps(self):
        vehicle = self._create_vehicle()
        workflow = self.Workflow.create({'vehicle_id': vehicle.id})
        self._set_outcomes(workflow, maintenance='valide', administratif='valide', hseq='valide', obc='valide')
        self.assertEqual(workflow.global_status, 'valide')
        self._set_outcomes(workflow, obc='rejete')
        self.assertEqual(workflow.global_status, 'rejete')

    def test_single_open_workflow(self):
        vehicle = self._create_vehicle()
        self.Workflow.create({'vehicle_id': vehicle.id})
        with self.assertRaises(ValidationError):
            self.Workflow.create({'vehicle_id': vehicle.id})

    def test_latest_workflow(self):
        vehicle = self._create_vehicle()
        with self.assertRaises(NoWorkflowError):
            self.Aggregator.get_latest_workflow(vehicle)

        first = self.Workflow._open_for_vehicle(vehicle)
        second = self.Workflow._open_for_vehicle(vehicle)
        self.assertEqual(first.state, 'closed')
        self.assertEqual(self.Aggregator.get_latest_workflow(vehicle), second)

    def test_history_and_statistics(self):
        before = self.Workflow.get_validation_statistics()
        vehicle = self._create_vehicle()
        workflow = self.Workflow.create({'vehicle_id': vehicle.id})
        self._set_outcomes(workflow, hseq='rejete')
        workflow._get_step('hseq')._set_outcome('valide', comment='Extincteur remplacé')

        history = workflow.history_ids
        self.assertEqual(len(history), 2)
        self.assertEqual(history[0].outcome, 'valide')
        self.assertEqual(history[0].commentaire, 'Extincteur remplacé')
        self.assertEqual(history[0].step_type, 'hseq')

        after = self.Workflow.get_validation_statistics()
        self.assertEqual(after['total'], before['total'] + 1)
        self.assertEqual(after['en_validation'], before['en_validation'] + 1)
        self.assertEqual(after['total'], after['en_validation'] + after['valide'] + after['rejete'])

# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

""" Processus SDBK Errors

All errors derive from odoo.exceptions so the web client shows them to the
operator, who retries the action by hand.
"""

from odoo.exceptions import UserError, ValidationError


class InvalidDateError(ValidationError):
    """Malformed or missing date where one is required."""


class NoWorkflowError(UserError):
    """Status synchronization requested for a vehicle without workflow."""


class TransientError(UserError):
    """Lock, network or storage failure; safe to retry the same action."""


class IllegalTransitionError(UserError):
    """Lifecycle entry point called from a state that does not permit it."""


class InconsistentStateError(UserError):
    """Stored status and validation_requise disagree and cannot be repaired."""

# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

import logging

from odoo import _, api, models
from odoo.exceptions import AccessError

from ..const import MANAGER_GROUP, STEP_GROUPS, TRANSPORT_GROUP

_logger = logging.getLogger(__name__)


class FleetSdbkAccessService(models.AbstractModel):
    """Capability checks for the SDBK process.

    A capability is ``ValidateStep(department)`` for the four validation
    departments, ``dispatch`` for delivery orders and ``override`` for the
    manual unblock of a vehicle. How a capability maps to groups is only
    known here.
    """

    _name = "fleet.sdbk.access"
    _description = "Service des capacités processus SDBK"

    def _capability_group(self, capability):
        if capability in STEP_GROUPS:
            return STEP_GROUPS[capability]
        if capability == 'dispatch':
            return TRANSPORT_GROUP
        if capability == 'override':
            return MANAGER_GROUP
        return None

    @api.model
    def has_capability(self, capability, user=None):
        """Return True when ``user`` (default: current user) holds ``capability``.

        Superuser mode (cron, sudo) holds every capability.
        """
        if user is None:
            if self.env.su:
                return True
            user = self.env.user
        group_xmlid = self._capability_group(capability)
        if not group_xmlid:
            return False
        return user.has_group(MANAGER_GROUP) or user.has_group(group_xmlid)

    @api.model
    def check_capability(self, capability):
        if not self.has_capability(capability):
            _logger.info(
                "User %s denied capability %s", self.env.user.login, capability
            )
            raise AccessError(_(
                "Vous n'avez pas les droits nécessaires pour cette action (%s). "
                "Veuillez contacter votre responsable SDBK.",
                capability,
            ))
        return True

    @api.model
    def get_user_role_label(self, user=None):
        """Department label recorded in the validation history."""
        user = user or self.env.user
        if user.has_group(MANAGER_GROUP):
            return 'responsable'
        roles = [step for step, xmlid in STEP_GROUPS.items() if user.has_group(xmlid)]
        if user.has_group(TRANSPORT_GROUP):
            roles.append('transport')
        return ', '.join(roles) or 'utilisateur'

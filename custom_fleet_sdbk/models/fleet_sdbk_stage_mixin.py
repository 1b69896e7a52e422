# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

from odoo import _, models
from odoo.exceptions import UserError

from ..const import CTX_LIFECYCLE


class FleetSdbkStageMixin(models.AbstractModel):
    """Stage record (diagnostic, controls, delivery order) whose state only
    moves through fleet.sdbk.lifecycle."""

    _name = 'fleet.sdbk.stage.mixin'
    _description = 'Étape du processus SDBK'

    def write(self, vals):
        if 'state' in vals and not (self.env.su and self.env.context.get(CTX_LIFECYCLE)):
            raise UserError(_(
                "L'état de %s ne peut être modifié que par les actions du processus SDBK.",
                self._description,
            ))
        return super().write(vals)

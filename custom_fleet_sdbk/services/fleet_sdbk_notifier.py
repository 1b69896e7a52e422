# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

import logging

from odoo import _, api, models

_logger = logging.getLogger(__name__)


class FleetSdbkNotifier(models.AbstractModel):
    """Fire-and-forget notification sink.

    Posts to the record chatter and logs. Delivery failures are logged and
    never reach the caller.
    """

    _name = "fleet.sdbk.notifier"
    _description = "Notifications processus SDBK"

    @api.model
    def notify(self, record, message, level='info', subject=None):
        log = _logger.warning if level in ('warning', 'danger') else _logger.info
        log("%s: %s", record.display_name if record else '-', message)
        if not record or not hasattr(record, 'message_post'):
            return False
        try:
            with self.env.cr.savepoint():
                record.message_post(
                    body=message,
                    subject=subject or _("Processus SDBK"),
                    message_type='notification',
                )
        except Exception as e:
            _logger.warning(
                "Failed to post notification on %s: %s", record.display_name, str(e)
            )
            return False
        return True

    @api.model
    def display_notification(self, title, message, level='success', sticky=False):
        """Client action shown as a toast by the web client."""
        return {
            'type': 'ir.actions.client',
            'tag': 'display_notification',
            'params': {
                'title': title,
                'message': message,
                'type': level,
                'sticky': sticky,
            },
        }

# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

import logging
import re

import psycopg2

from odoo import _, api, models
from odoo.exceptions import ValidationError

from ..exceptions import TransientError

_logger = logging.getLogger(__name__)

ATTACHMENT_URL = '/web/content/%s?access_token=%s'
ATTACHMENT_URL_RE = re.compile(r'^/web/content/(\d+)(?:[/?].*)?$')


class FleetSdbkStorage(models.AbstractModel):
    """Object storage for documents and stage attachments.

    Files live in ``ir.attachment``; callers only keep the returned URL and
    never look at the file content.
    """

    _name = "fleet.sdbk.storage"
    _description = "Stockage fichiers processus SDBK"

    @api.model
    def upload(self, datas, filename, res_model=None, res_id=None, mimetype=None):
        """Store a base64 payload and return its URL, readable with the access token only."""
        if not datas:
            raise ValidationError(_("Aucun fichier à téléverser."))
        if not filename:
            raise ValidationError(_("Le nom du fichier est obligatoire."))

        vals = {
            'name': filename,
            'datas': datas,
            'res_model': res_model,
            'res_id': res_id or False,
        }
        if mimetype:
            vals['mimetype'] = mimetype
        try:
            with self.env.cr.savepoint():
                attachment = self.env['ir.attachment'].sudo().create(vals)
                access_token = attachment.generate_access_token()[0]
        except (OSError, psycopg2.OperationalError) as e:
            _logger.warning("Upload of %s failed: %s", filename, str(e))
            raise TransientError(_(
                "Le téléversement du fichier %s a échoué. Veuillez réessayer.", filename
            )) from e

        _logger.debug("Stored %s as attachment %s", filename, attachment.id)
        return ATTACHMENT_URL % (attachment.id, access_token)

    @api.model
    def get_attachment(self, url):
        match = ATTACHMENT_URL_RE.match(url or '')
        if not match:
            return self.env['ir.attachment']
        return self.env['ir.attachment'].sudo().browse(int(match.group(1))).exists()

    @api.model
    def delete(self, url):
        """Delete the file behind ``url``. Unknown URLs are ignored."""
        attachment = self.get_attachment(url)
        if not attachment:
            return False
        try:
            with self.env.cr.savepoint():
                attachment.unlink()
        except (OSError, psycopg2.OperationalError) as e:
            _logger.warning("Delete of %s failed: %s", url, str(e))
            raise TransientError(_(
                "La suppression du fichier a échoué. Veuillez réessayer."
            )) from e
        return True

# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

import logging
from datetime import timedelta

from dateutil.relativedelta import relativedelta
from markupsafe import Markup

from odoo import _, api, fields, models
from odoo.exceptions import UserError, ValidationError

from ..const import ALERT_LEVELS, DOCUMENT_VALIDITY_MONTHS

_logger = logging.getLogger(__name__)

DATE_FIELDS = ('issue_date', 'expiry_date')


class FleetSdbkDocument(models.Model):
    """
    Document réglementaire d'un véhicule ou d'un chauffeur.

    Types de documents:
    - Véhicule: carte grise, assurance, contrôle technique, autorisation de
      transport, conformité, SOCOTAC, jaugeage, extincteurs
    - Chauffeur: permis, visite médicale, formations ADR / HSE / conduite,
      carte professionnelle, pièce d'identité

    Le niveau d'alerte (valide / à renouveler / expiré) est recalculé à
    chaque lecture par rapport à la date du jour: il n'est jamais stocké.
    """
    _name = 'fleet.sdbk.document'
    _description = 'Document Réglementaire SDBK'
    _inherit = ['mail.thread', 'mail.activity.mixin']
    _order = 'expiry_date asc, id desc'
    _rec_names_search = ['name', 'document_number']

    # ========== IDENTIFICATION ==========

    name = fields.Char(
        string='Libellé',
        compute='_compute_name',
        store=True,
    )

    vehicle_id = fields.Many2one(
        'fleet.vehicle',
        string='Véhicule',
        ondelete='restrict',
        index=True,
        tracking=True,
    )

    driver_id = fields.Many2one(
        'hr.employee',
        string='Chauffeur',
        ondelete='cascade',
        index=True,
        tracking=True,
    )

    document_type = fields.Selection(
        [
            # Véhicule
            ('carte_grise', 'Carte grise'),
            ('assurance', 'Assurance'),
            ('controle_technique', 'Contrôle technique'),
            ('autorisation_transport', 'Autorisation transport'),
            ('conformite', 'Conformité'),
            ('controle_socotac', 'Contrôle SOCOTAC'),
            ('certificat_jaugeage', 'Certificat de jaugeage'),
            ('attestation_extincteurs', 'Attestation extincteurs'),
            # Chauffeur
            ('permis_conduire', 'Permis de conduire'),
            ('visite_medicale', 'Visite médicale'),
            ('formation_adr', 'Formation ADR'),
            ('formation_hse', 'Formation HSE'),
            ('formation_conduite', 'Formation conduite'),
            ('carte_professionnelle', 'Carte professionnelle'),
            ('carte_identite', "Carte d'identité"),
            ('autre', 'Autre'),
        ],
        string='Type de Document',
        required=True,
        default='autre',
        tracking=True,
    )

    document_number = fields.Char(string='Numéro de Document')

    # ========== DATES ==========

    issue_date = fields.Date(string='Date Émission')

    expiry_date = fields.Date(
        string='Date Expiration',
        tracking=True,
    )

    alert_level = fields.Selection(
        ALERT_LEVELS,
        string='Niveau Alerte',
        compute='_compute_expiry_status',
    )

    jours_restants = fields.Integer(
        string='Jours Restants',
        compute='_compute_expiry_status',
        help="Négatif si le document est expiré. 0 sans date d'expiration."
    )

    # ========== FICHIER ==========

    file_url = fields.Char(string='URL Fichier', copy=False)
    file_name = fields.Char(string='Nom Fichier', copy=False)

    # ========== SUIVI ==========

    active = fields.Boolean(default=True)

    superseded_by_id = fields.Many2one(
        'fleet.sdbk.document',
        string='Remplacé par',
        copy=False,
        readonly=True,
    )

    responsible_id = fields.Many2one(
        'res.users',
        string='Responsable',
        default=lambda self: self.env.user,
    )

    company_id = fields.Many2one(
        'res.company',
        string='Société',
        required=True,
        default=lambda self: self.env.company,
    )

    notes = fields.Text(string='Notes')

    # ========== MÉTHODES COMPUTE ==========

    @api.depends('vehicle_id', 'driver_id', 'document_type', 'document_number')
    def _compute_name(self):
        for doc in self:
            type_label = dict(doc._fields['document_type'].selection).get(doc.document_type, _('Document'))
            owner = doc.vehicle_id or doc.driver_id
            name = f"{type_label} - {owner.display_name}" if owner else type_label
            if doc.document_number:
                name = f"{name} - N°{doc.document_number}"
            doc.name = name

    @api.depends('expiry_date')
    @api.depends_context('tz')
    def _compute_expiry_status(self):
        Expiry = self.env['fleet.sdbk.expiry.service']
        today = fields.Date.context_today(self)
        alert_days = Expiry.get_alert_days()
        for doc in self:
            result = Expiry.evaluate(doc.expiry_date, today=today, alert_days=alert_days)
            doc.alert_level = result['alert_level']
            doc.jours_restants = result['jours_restants'] or 0

    # ========== CONTRAINTES ==========

    @api.constrains('vehicle_id', 'driver_id')
    def _check_owner(self):
        for doc in self:
            if bool(doc.vehicle_id) == bool(doc.driver_id):
                raise ValidationError(_(
                    "Un document doit appartenir soit à un véhicule, soit à un chauffeur."
                ))

    @api.constrains('issue_date', 'expiry_date')
    def _check_dates(self):
        for doc in self:
            if doc.issue_date and doc.expiry_date and doc.expiry_date < doc.issue_date:
                raise ValidationError(_(
                    "La date d'expiration doit être postérieure à la date d'émission."
                ))

    # ========== MÉTHODES CRUD ==========

    def _normalize_dates(self, vals):
        Expiry = self.env['fleet.sdbk.expiry.service']
        for field_name in DATE_FIELDS:
            if field_name in vals:
                vals[field_name] = Expiry.to_date(vals[field_name], self._fields[field_name].string) or False
        return vals

    @api.model_create_multi
    def create(self, vals_list):
        """Sans date d'expiration, les documents chauffeur reçoivent leur durée de validité usuelle."""
        for vals in vals_list:
            self._normalize_dates(vals)
            months = DOCUMENT_VALIDITY_MONTHS.get(vals.get('document_type'))
            if months and vals.get('issue_date') and 'expiry_date' not in vals:
                vals['expiry_date'] = vals['issue_date'] + relativedelta(months=months)
        return super().create(vals_list)

    def write(self, vals):
        return super().write(self._normalize_dates(dict(vals)))

    def unlink(self):
        """Supprime aussi les fichiers stockés."""
        urls = [url for url in self.mapped('file_url') if url]
        result = super().unlink()
        Storage = self.env['fleet.sdbk.storage']
        for url in urls:
            Storage.delete(url)
        return result

    # ========== MÉTHODES MÉTIER ==========

    def upload_file(self, datas, filename, mimetype=None):
        """Stocke le fichier du document (base64) et remplace l'ancien."""
        self.ensure_one()
        Storage = self.env['fleet.sdbk.storage']
        previous_url = self.file_url
        url = Storage.upload(datas, filename, res_model=self._name, res_id=self.id, mimetype=mimetype)
        self.write({'file_url': url, 'file_name': filename})
        if previous_url and previous_url != url:
            Storage.delete(previous_url)
        return url

    def action_replace(self, vals):
        """
        Remplace le document par une nouvelle version (renouvellement).

        L'ancien document est archivé et pointe vers le nouveau.
        """
        self.ensure_one()
        if not self.active:
            raise UserError(_("Le document %s a déjà été remplacé.", self.name))
        new_doc = self.copy(dict(vals))
        self.write({'active': False, 'superseded_by_id': new_doc.id})
        self.activity_unlink(['mail.mail_activity_data_todo'])
        new_doc.message_post(
            body=_("Renouvellement du document %s", self.name),
            subject=_("Renouvellement"),
        )
        return new_doc

    @api.model
    def get_expiry_alerts(self, days=None, vehicles=None, drivers=None):
        """
        Documents véhicules et chauffeurs expirés ou à renouveler.

        Args:
            days: fenêtre d'alerte (défaut: paramètre de configuration)
            vehicles / drivers: restreindre à ces propriétaires

        Returns:
            recordset trié du plus critique au moins critique
        """
        if days is None:
            days = self.env['fleet.sdbk.expiry.service'].get_alert_days()
        limit_date = fields.Date.context_today(self) + timedelta(days=days)
        domain = [
            ('expiry_date', '!=', False),
            ('expiry_date', '<=', limit_date),
        ]
        if vehicles is not None and drivers is not None:
            domain += ['|', ('vehicle_id', 'in', vehicles.ids), ('driver_id', 'in', drivers.ids)]
        elif vehicles is not None:
            domain.append(('vehicle_id', 'in', vehicles.ids))
        elif drivers is not None:
            domain.append(('driver_id', 'in', drivers.ids))
        documents = self.search(domain)
        return documents.sorted(lambda d: (d.expiry_date, d.id))

    def _schedule_renewal_activity(self):
        """Crée une activité de renouvellement, sans doublon."""
        self.ensure_one()
        todo = self.env.ref('mail.mail_activity_data_todo')
        existing = self.env['mail.activity'].search([
            ('res_model', '=', self._name),
            ('res_id', '=', self.id),
            ('activity_type_id', '=', todo.id),
        ], limit=1)
        if existing:
            return False

        if self.alert_level == 'expire':
            note = _("URGENT: ce document est expiré depuis %s jours.", abs(self.jours_restants))
        else:
            note = _("Ce document expire dans %s jours. Planifier le renouvellement.", self.jours_restants)
        return self.activity_schedule(
            'mail.mail_activity_data_todo',
            user_id=self.responsible_id.id or self.env.user.id,
            date_deadline=self.expiry_date or fields.Date.context_today(self),
            summary=_("Renouveler: %s", self.name),
            note=note,
        )

    # ========== CRON ==========

    @api.model
    def _cron_scan_document_expiry(self):
        """
        Cron quotidien: alertes d'échéance des documents.

        - une activité de renouvellement par document (sans doublon)
        - un message récapitulatif par véhicule / chauffeur
        """
        ConfigParam = self.env['ir.config_parameter'].sudo()
        if not ConfigParam.get_param('custom_fleet_sdbk.enable_expiry_scan'):
            _logger.info("SDBK document expiry scan disabled")
            return {'documents': 0, 'activities': 0}

        Expiry = self.env['fleet.sdbk.expiry.service']
        documents = self.sudo().get_expiry_alerts()
        _logger.info("SDBK expiry scan: %d documents to renew", len(documents))

        activity_count = 0
        by_owner = {}
        for doc in documents:
            if doc._schedule_renewal_activity():
                activity_count += 1
            owner = doc.vehicle_id or doc.driver_id
            by_owner.setdefault(owner, self.browse())
            by_owner[owner] |= doc

        Notifier = self.env['fleet.sdbk.notifier']
        for owner, docs in by_owner.items():
            lines = []
            critical = False
            for doc in docs:
                critical = critical or Expiry.is_critical(doc.jours_restants)
                if doc.alert_level == 'expire':
                    lines.append(_("%(doc)s: expiré depuis %(days)s jours", doc=doc.name, days=abs(doc.jours_restants)))
                else:
                    lines.append(_("%(doc)s: expire dans %(days)s jours", doc=doc.name, days=doc.jours_restants))
            Notifier.notify(
                owner,
                Markup("%s<br/>%s") % (_("Documents à renouveler:"), Markup("<br/>").join(lines)),
                level='warning' if critical else 'info',
                subject=_("Alerte Échéance"),
            )

        return {'documents': len(documents), 'activities': activity_count}

# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

import logging

from odoo import _, api, fields, models
from odoo.exceptions import UserError, ValidationError

from ..const import (
    CTX_LIFECYCLE,
    CTX_STATUS_SYNC,
    INITIAL_PROCESS_STATE,
    PROCESS_STATES,
    VEHICLE_STATUSES,
)
from ..exceptions import InconsistentStateError, NoWorkflowError, TransientError

_logger = logging.getLogger(__name__)

# Only fleet.sdbk.status.sync writes these
STATUS_FIELDS = ('sdbk_status', 'validation_requise', 'status_synced_at')


class FleetVehicle(models.Model):
    """
    Extension du modèle fleet.vehicle pour le processus SDBK.

    Ajoute:
    - Numéro SDBK (V001, V002, ...)
    - Statut canonique (disponible / indisponible / validation requise),
      écrit uniquement par la synchronisation des validations
    - État du processus (maintenance → contrôles → mission)
    - Documents réglementaires, workflows de validation, contrôles et BL
    """
    _inherit = 'fleet.vehicle'

    # ========== IDENTIFICATION ==========

    sdbk_number = fields.Char(
        string='Numéro SDBK',
        copy=False,
        readonly=True,
        index=True,
        default=lambda self: _('Nouveau'),
        help="Numéro séquentiel du véhicule (V001, V002...). Généré automatiquement."
    )

    vehicle_category = fields.Selection(
        [
            ('porteur', 'Porteur'),
            ('tracteur_remorque', 'Tracteur + Remorque'),
        ],
        string='Type de Véhicule',
        default='porteur',
        tracking=True,
    )

    transport_type = fields.Selection(
        [
            ('hydrocarbures', 'Hydrocarbures'),
            ('bauxite', 'Bauxite'),
        ],
        string='Type de Transport',
        default='hydrocarbures',
        tracking=True,
    )

    sdbk_driver_id = fields.Many2one(
        'hr.employee',
        string='Chauffeur Assigné',
        tracking=True,
        help="Chauffeur (employé) affecté au véhicule pour les missions SDBK"
    )

    # ========== STATUT CANONIQUE ==========

    sdbk_status = fields.Selection(
        VEHICLE_STATUSES,
        string='Statut SDBK',
        default='validation_requise',
        required=True,
        copy=False,
        readonly=True,
        tracking=True,
        index=True,
        help="Dérivé du dernier workflow de validation. "
             "Un seul refus rend le véhicule indisponible."
    )

    validation_requise = fields.Boolean(
        string='Validation Requise',
        default=True,
        copy=False,
        readonly=True,
        help="Vrai tant que le dernier workflow de validation n'est pas terminé"
    )

    status_synced_at = fields.Datetime(
        string='Dernière Synchronisation',
        copy=False,
        readonly=True,
    )

    # ========== PROCESSUS ==========

    process_state = fields.Selection(
        PROCESS_STATES,
        string='Étape Processus',
        default=INITIAL_PROCESS_STATE,
        required=True,
        copy=False,
        readonly=True,
        tracking=True,
        index=True,
    )

    process_state_date = fields.Datetime(
        string='Date Changement Étape',
        copy=False,
        readonly=True,
    )

    # ========== RELATIONS ==========

    sdbk_document_ids = fields.One2many(
        'fleet.sdbk.document',
        'vehicle_id',
        string='Documents Réglementaires',
    )

    validation_workflow_ids = fields.One2many(
        'fleet.validation.workflow',
        'vehicle_id',
        string='Workflows de Validation',
    )

    diagnostic_ids = fields.One2many(
        'fleet.maintenance.diagnostic',
        'vehicle_id',
        string='Diagnostics Maintenance',
    )

    obc_control_ids = fields.One2many(
        'fleet.control.obc',
        'vehicle_id',
        string='Contrôles OBC',
    )

    hsse_control_ids = fields.One2many(
        'fleet.control.hsse',
        'vehicle_id',
        string='Contrôles HSSE',
    )

    delivery_order_ids = fields.One2many(
        'fleet.delivery.order',
        'vehicle_id',
        string='Bons de Livraison',
    )

    # ========== INDICATEURS ==========

    sdbk_document_count = fields.Integer(
        string='Nb Documents',
        compute='_compute_sdbk_document_stats',
    )

    expiring_document_count = fields.Integer(
        string='Documents à Renouveler',
        compute='_compute_sdbk_document_stats',
        help="Documents expirés ou expirant dans la fenêtre d'alerte"
    )

    # ========== MÉTHODES COMPUTE ==========

    @api.depends('sdbk_document_ids.expiry_date', 'sdbk_document_ids.active')
    def _compute_sdbk_document_stats(self):
        for vehicle in self:
            documents = vehicle.sdbk_document_ids
            vehicle.sdbk_document_count = len(documents)
            vehicle.expiring_document_count = len(
                documents.filtered(lambda d: d.alert_level in ('expire', 'a_renouveler'))
            )

    # ========== MÉTHODES CRUD ==========

    @api.model_create_multi
    def create(self, vals_list):
        """Numérote le véhicule (V001...) et vérifie la cohérence du statut initial."""
        StatusSync = self.env['fleet.sdbk.status.sync']
        for vals in vals_list:
            if vals.get('sdbk_number', _('Nouveau')) == _('Nouveau'):
                vals['sdbk_number'] = self.env['ir.sequence'].next_by_code('fleet.vehicle.sdbk.number') or _('Nouveau')
            status = vals.get('sdbk_status', 'validation_requise')
            validation_requise = vals.get('validation_requise', True)
            if not StatusSync.is_consistent(status, validation_requise):
                raise ValidationError(_(
                    "Statut initial incohérent: %(status)s avec validation requise = %(flag)s.",
                    status=status, flag=validation_requise,
                ))

        vehicles = super().create(vals_list)
        for vehicle in vehicles:
            _logger.info("SDBK vehicle %s created as %s", vehicle.display_name, vehicle.sdbk_number)
        return vehicles

    def _sdbk_writer(self, key):
        # Only services running as sudo may use the context keys
        return self.env.su and self.env.context.get(key)

    def write(self, vals):
        """Le statut et l'étape du processus ne s'écrivent que par leurs services."""
        if any(field in vals for field in STATUS_FIELDS) and not self._sdbk_writer(CTX_STATUS_SYNC):
            raise UserError(_(
                "Le statut SDBK est calculé à partir des validations et ne peut pas être modifié directement."
            ))
        if 'process_state' in vals and not self._sdbk_writer(CTX_LIFECYCLE):
            raise UserError(_(
                "L'étape du processus ne peut être modifiée que par les actions du processus SDBK."
            ))
        return super().write(vals)

    # ========== MÉTHODES MÉTIER ==========

    def _get_open_workflow(self):
        self.ensure_one()
        return self.env['fleet.validation.workflow'].sudo().search([
            ('vehicle_id', '=', self.id),
            ('state', '=', 'open'),
        ], order='create_date desc, id desc', limit=1)

    def get_expiring_documents(self, days=None):
        """Documents expirés ou expirant sous ``days`` jours, les plus urgents d'abord."""
        self.ensure_one()
        return self.env['fleet.sdbk.document'].get_expiry_alerts(days=days, vehicles=self)

    # ========== MÉTHODES ACTION ==========

    def action_sync_status(self):
        """Bouton: recalcule le statut depuis le dernier workflow de validation."""
        self.ensure_one()
        Notifier = self.env['fleet.sdbk.notifier']
        try:
            status = self.env['fleet.sdbk.status.sync'].synchronize(self)
        except NoWorkflowError as e:
            return Notifier.display_notification(_("Synchronisation"), str(e), level='warning')
        label = dict(VEHICLE_STATUSES).get(status, status)
        return Notifier.display_notification(
            _("Synchronisation"),
            _("Statut du véhicule %(vehicle)s: %(status)s", vehicle=self.display_name, status=label),
        )

    def action_start_maintenance(self):
        self.ensure_one()
        diagnostic = self.env['fleet.sdbk.lifecycle'].start_maintenance_diagnostic(self)
        return {
            'type': 'ir.actions.act_window',
            'name': _('Diagnostic Maintenance'),
            'res_model': 'fleet.maintenance.diagnostic',
            'res_id': diagnostic.id,
            'view_mode': 'form',
            'target': 'current',
        }

    def action_send_to_admin_review(self):
        self.ensure_one()
        self.env['fleet.sdbk.lifecycle'].send_to_admin_review(self)
        return True

    def action_admin_unblock(self, reason):
        """Déblocage manuel d'un véhicule bloqué (responsable SDBK uniquement).

        Le véhicule repart en maintenance. Le statut canonique n'est pas
        modifié: il le sera par le prochain workflow de validation.
        """
        self.ensure_one()
        self.env['fleet.sdbk.access'].check_capability('override')
        if not reason or not reason.strip():
            raise UserError(_("Le motif du déblocage est obligatoire."))
        vehicle = self.sudo()
        self.env['fleet.sdbk.status.sync'].lock_vehicle(vehicle)
        if vehicle.process_state != 'bloque':
            raise UserError(_("Le véhicule %s n'est pas bloqué.", vehicle.display_name))

        vehicle.with_context(**{CTX_LIFECYCLE: True}).write({
            'process_state': INITIAL_PROCESS_STATE,
            'process_state_date': fields.Datetime.now(),
        })
        self.env['fleet.sdbk.notifier'].notify(
            vehicle,
            _("Véhicule débloqué par %(user)s. Motif: %(reason)s",
              user=self.env.user.name, reason=reason.strip()),
            level='warning',
            subject=_("Déblocage"),
        )
        return True

    def action_view_validation_workflows(self):
        self.ensure_one()
        return {
            'name': _('Validations - %s', self.name),
            'type': 'ir.actions.act_window',
            'res_model': 'fleet.validation.workflow',
            'view_mode': 'list,form',
            'domain': [('vehicle_id', '=', self.id)],
            'context': {'default_vehicle_id': self.id},
        }

    # ========== CRON ==========

    @api.model
    def _cron_repair_inconsistent_status(self):
        """Cron: resynchronise les véhicules dont le couple statut / validation requise est incohérent."""
        StatusSync = self.env['fleet.sdbk.status.sync']
        vehicles = self.sudo().search([])
        inconsistent = vehicles.filtered(
            lambda v: not StatusSync.is_consistent(v.sdbk_status, v.validation_requise)
        )
        if not inconsistent:
            _logger.info("No inconsistent SDBK vehicle status")
            return 0

        repaired = 0
        for vehicle in inconsistent:
            try:
                StatusSync.ensure_consistent(vehicle)
                repaired += 1
            except (InconsistentStateError, TransientError) as e:
                _logger.error("Could not repair status of vehicle %s: %s", vehicle.display_name, str(e))
        _logger.info("Repaired %d/%d inconsistent SDBK vehicle status", repaired, len(inconsistent))
        return repaired

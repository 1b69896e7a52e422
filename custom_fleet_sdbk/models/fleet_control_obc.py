# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

import logging

from odoo import _, api, fields, models

_logger = logging.getLogger(__name__)

# Each infraction costs 5 points out of 100
INFRACTION_PENALTY = 5
INFRACTION_FIELDS = (
    'acceleration_excessive',
    'freinage_brusque',
    'exces_vitesse_urbain',
    'exces_vitesse_campagne',
    'temps_conduite_depasse',
    'conduite_continue_sans_pause',
    'conduite_nuit_non_autorisee',
    'pause_reglementaire_non_respectee',
    'anomalies_techniques',
)


class FleetControlObc(models.Model):
    """
    Contrôle OBC (ordinateur de bord) et safe-to-load, étape 3 du processus.

    Le score global part de 100 et perd 5 points par infraction relevée.
    La décision (conforme, safe to load) reste celle du contrôleur.
    """
    _name = 'fleet.control.obc'
    _description = 'Contrôle OBC'
    _inherit = ['fleet.sdbk.stage.mixin', 'mail.thread']
    _order = 'date_controle desc, id desc'

    name = fields.Char(
        string='Référence',
        required=True,
        copy=False,
        readonly=True,
        default=lambda self: _('Nouveau'),
    )
    vehicle_id = fields.Many2one(
        'fleet.vehicle',
        string='Véhicule',
        required=True,
        ondelete='cascade',
        index=True,
    )
    driver_id = fields.Many2one('hr.employee', string='Chauffeur')
    state = fields.Selection(
        [
            ('en_cours', 'En cours'),
            ('termine', 'Terminé'),
        ],
        string='État',
        default='en_cours',
        required=True,
        tracking=True,
    )
    date_controle = fields.Datetime(string='Date Contrôle', default=fields.Datetime.now)

    # ========== INFRACTIONS ==========

    acceleration_excessive = fields.Integer(string='Accélérations Excessives')
    freinage_brusque = fields.Integer(string='Freinages Brusques')
    exces_vitesse_urbain = fields.Integer(string='Excès Vitesse Urbain')
    exces_vitesse_campagne = fields.Integer(string='Excès Vitesse Campagne')
    temps_conduite_depasse = fields.Integer(string='Temps de Conduite Dépassé')
    conduite_continue_sans_pause = fields.Integer(string='Conduite sans Pause')
    conduite_nuit_non_autorisee = fields.Integer(string='Conduite de Nuit Interdite')
    pause_reglementaire_non_respectee = fields.Integer(string='Pause non Respectée')
    anomalies_techniques = fields.Integer(string='Anomalies Techniques')

    score_global = fields.Integer(
        string='Score Global',
        compute='_compute_score_global',
        store=True,
    )

    # ========== DÉCISION ==========

    conforme = fields.Boolean(string='Conforme', tracking=True)
    safe_to_load_valide = fields.Boolean(string='Safe to Load Validé', tracking=True)
    document_safe_to_load_url = fields.Char(string='Document Safe to Load')
    controleur_nom = fields.Char(string='Contrôleur')
    commentaires = fields.Text(string='Commentaires')

    @api.depends(*INFRACTION_FIELDS)
    def _compute_score_global(self):
        for control in self:
            infractions = sum(control[field_name] for field_name in INFRACTION_FIELDS)
            control.score_global = max(0, 100 - infractions * INFRACTION_PENALTY)

    @api.model_create_multi
    def create(self, vals_list):
        for vals in vals_list:
            if vals.get('name', _('Nouveau')) == _('Nouveau'):
                vals['name'] = self.env['ir.sequence'].next_by_code('fleet.control.obc') or _('Nouveau')
        return super().create(vals_list)

    @api.model
    def _create_or_update_open(self, vehicle, vals):
        """Complète le contrôle en cours du véhicule, ou en crée un."""
        control = self.search([
            ('vehicle_id', '=', vehicle.id),
            ('state', '=', 'en_cours'),
        ], order='id desc', limit=1)
        if control:
            control.write(vals)
            return control
        vals = dict(vals, vehicle_id=vehicle.id)
        vals.setdefault('driver_id', vehicle.sdbk_driver_id.id or False)
        return self.create(vals)

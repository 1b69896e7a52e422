# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

from odoo import _, api, fields, models

CHECKLIST_FIELDS = (
    'extincteur_emplacement_ok',
    'extincteur_date_validite_ok',
    'extincteur_pression_ok',
    'trousse_secours_complete',
    'trousse_secours_date_ok',
    'triangle_signalisation_present',
    'triangle_signalisation_etat_ok',
    'gilets_nombre_suffisant',
    'gilets_etat_visible',
    'fuite_carburant_absente',
    'fuite_huile_absente',
    'citerne_proprete_exterieure',
    'citerne_proprete_interieure',
    'danger_visible_absent',
    'securite_generale_ok',
)


class FleetControlHsse(models.Model):
    """Contrôle HSSE avant mise à disposition (étape 4 du processus)."""
    _name = 'fleet.control.hsse'
    _description = 'Contrôle HSSE'
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

    # ========== CHECKLIST ==========

    extincteur_emplacement_ok = fields.Boolean(string='Extincteur en place')
    extincteur_date_validite_ok = fields.Boolean(string='Extincteur: date de validité OK')
    extincteur_pression_ok = fields.Boolean(string='Extincteur: pression conforme')
    trousse_secours_complete = fields.Boolean(string='Trousse de secours complète')
    trousse_secours_date_ok = fields.Boolean(string='Trousse: date de péremption OK')
    triangle_signalisation_present = fields.Boolean(string='Triangle présent')
    triangle_signalisation_etat_ok = fields.Boolean(string='Triangle en bon état')
    gilets_nombre_suffisant = fields.Boolean(string='Nombre de gilets suffisant')
    gilets_etat_visible = fields.Boolean(string='Gilets haute visibilité')
    fuite_carburant_absente = fields.Boolean(string='Pas de fuite carburant')
    fuite_huile_absente = fields.Boolean(string='Pas de fuite huile')
    citerne_proprete_exterieure = fields.Boolean(string='Citerne propre extérieurement')
    citerne_proprete_interieure = fields.Boolean(string='Citerne propre intérieurement')
    danger_visible_absent = fields.Boolean(string='Absence de danger visible')
    securite_generale_ok = fields.Boolean(string='Sécurité générale conforme')

    checklist_complete = fields.Boolean(
        string='Checklist Complète',
        compute='_compute_checklist_complete',
        store=True,
    )

    # ========== DÉCISION ==========

    conforme = fields.Boolean(string='Conforme', tracking=True)
    points_bloquants = fields.Text(
        string='Points Bloquants',
        help="Un point bloquant par ligne"
    )
    controleur_nom = fields.Char(string='Contrôleur')
    commentaires = fields.Text(string='Commentaires')

    @api.depends(*CHECKLIST_FIELDS)
    def _compute_checklist_complete(self):
        for control in self:
            control.checklist_complete = all(control[field_name] for field_name in CHECKLIST_FIELDS)

    @api.model_create_multi
    def create(self, vals_list):
        for vals in vals_list:
            if vals.get('name', _('Nouveau')) == _('Nouveau'):
                vals['name'] = self.env['ir.sequence'].next_by_code('fleet.control.hsse') or _('Nouveau')
        return super().create(vals_list)

    @api.model
    def _create_or_update_open(self, vehicle, vals):
        control = self.search([
            ('vehicle_id', '=', vehicle.id),
            ('state', '=', 'en_cours'),
        ], order='id desc', limit=1)
        if control:
            control.write(vals)
            return control
        return self.create(dict(vals, vehicle_id=vehicle.id))

    def get_points_bloquants(self):
        self.ensure_one()
        return [line.strip() for line in (self.points_bloquants or '').splitlines() if line.strip()]

# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

"""
Bon de livraison (BL) hydrocarbures.
Workflow: emis → livre
Émis et clôturé uniquement par fleet.sdbk.lifecycle (étapes 5 et 6).
"""

import logging

from odoo import _, api, fields, models
from odoo.exceptions import ValidationError

_logger = logging.getLogger(__name__)


class FleetDeliveryOrder(models.Model):
    _name = 'fleet.delivery.order'
    _description = 'Bon de Livraison'
    _inherit = ['fleet.sdbk.stage.mixin', 'mail.thread', 'mail.activity.mixin']
    _order = 'date_emission desc, id desc'

    name = fields.Char(
        string='Numéro BL',
        required=True,
        copy=False,
        readonly=True,
        index=True,
        default=lambda self: _('Nouveau'),
    )

    vehicle_id = fields.Many2one(
        'fleet.vehicle',
        string='Véhicule',
        required=True,
        ondelete='restrict',
        index=True,
    )
    driver_id = fields.Many2one('hr.employee', string='Chauffeur', tracking=True)

    state = fields.Selection(
        [
            ('emis', 'Émis'),
            ('livre', 'Livré'),
        ],
        string='État',
        default='emis',
        required=True,
        tracking=True,
    )

    # ========== CLIENT ==========

    client_nom = fields.Char(string='Client', required=True)
    client_code = fields.Char(string='Code Client')
    destination = fields.Char(string='Destination', required=True)
    date_emission = fields.Date(string='Date Émission', default=fields.Date.context_today)

    # ========== PRODUIT ==========

    produit = fields.Selection(
        [
            ('essence', 'Essence'),
            ('gasoil', 'Gasoil'),
        ],
        string='Produit',
        required=True,
        default='gasoil',
    )
    quantite_prevue = fields.Float(string='Quantité Prévue (L)')

    # ========== SUIVI (retour de mission) ==========

    numero_tournee = fields.Char(string='Numéro de Tournée')
    date_chargement_reelle = fields.Datetime(string='Chargement Réel')
    date_arrivee_reelle = fields.Datetime(string='Arrivée Réelle')
    date_dechargement = fields.Datetime(string='Déchargement')
    quantite_livree = fields.Float(string='Quantité Livrée (L)')
    manquant_cuve = fields.Float(string='Manquant Cuve (L)')
    manquant_compteur = fields.Float(string='Manquant Compteur (L)')
    manquant_total = fields.Float(
        string='Manquant Total (L)',
        compute='_compute_manquant_total',
        store=True,
        help="Information uniquement: n'a aucun effet sur le statut du véhicule"
    )
    observations = fields.Text(string='Observations')

    @api.depends('manquant_cuve', 'manquant_compteur')
    def _compute_manquant_total(self):
        for order in self:
            order.manquant_total = order.manquant_cuve + order.manquant_compteur

    @api.constrains('quantite_prevue', 'quantite_livree')
    def _check_quantities(self):
        for order in self:
            if order.quantite_prevue < 0 or order.quantite_livree < 0:
                raise ValidationError(_("Les quantités ne peuvent pas être négatives."))

    @api.model_create_multi
    def create(self, vals_list):
        for vals in vals_list:
            if vals.get('name', _('Nouveau')) == _('Nouveau'):
                vals['name'] = self.env['ir.sequence'].next_by_code('fleet.delivery.order') or _('Nouveau')
        return super().create(vals_list)

    def action_close(self):
        """Bouton: retour de mission, le véhicule repart en maintenance."""
        self.ensure_one()
        self.env['fleet.sdbk.lifecycle'].close_delivery_order(self)
        return True

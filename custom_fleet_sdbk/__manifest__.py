# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

{
    'name': 'Processus SDBK - Validation Flotte',
    'version': '19.0.1.0.0',
    'category': 'Operations/Fleet',
    'sequence': 96,
    'summary': 'Cycle de vie véhicule SDBK: maintenance, contrôles administratif/OBC/HSSE, BL, échéances documents',
    'description': """
Processus SDBK
==============

Gestion du cycle de validation des véhicules de transport (hydrocarbures / bauxite).

**Fonctionnalités principales:**

* **Cycle de vie véhicule (processus SDBK):**
    - Retour maintenance → Maintenance → Vérification administrative → Contrôle OBC → Contrôle HSSE → Disponible → En mission
    - Table de transitions fermée, transitions illégales refusées
    - Déblocage manuel réservé aux responsables

* **Workflow de validation par service:**
    - Une étape par service (maintenance, administratif, HSEQ, OBC)
    - Un seul rejet bloque le véhicule
    - Synchronisation du statut véhicule (disponible / indisponible / validation requise)
    - Historique des validations

* **Conformité documentaire:**
    - Documents véhicules et chauffeurs
    - Alertes J-30 (à renouveler) et documents expirés
    - Remplacement de document avec archivage de l'ancien

* **Bons de livraison:**
    - Émission (véhicule en mission) et clôture au retour (retour maintenance)

**Sécurité:**
    - Un groupe par service + Transport + Responsable SDBK
""",
    'author': 'Équipe Développement Odoo',
    'website': 'https://www.odoo.com',
    'depends': [
        'base',
        'fleet',
        'hr',
        'mail',
    ],
    'data': [
        # Sécurité - doit être chargé en premier
        'security/sdbk_groups.xml',
        'security/ir.model.access.csv',

        # Données de base
        'data/ir_sequence_data.xml',
        'data/ir_config_parameter_data.xml',
        'data/ir_cron_data.xml',
    ],
    'installable': True,
    'application': False,
    'auto_install': False,
    'license': 'LGPL-3',
}

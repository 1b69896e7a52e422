# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

""" Processus SDBK Constants """

# Lifecycle states (processus SDBK)
PROCESS_STATES = [
    ('retour_maintenance', 'Retour maintenance'),
    ('maintenance_en_cours', 'Maintenance en cours'),
    ('disponible_maintenance', 'Sorti de maintenance'),
    ('verification_admin', 'Vérification administrative'),
    ('controle_obc', 'Contrôle OBC'),
    ('controle_hsse', 'Contrôle HSSE'),
    ('disponible', 'Disponible'),
    ('en_mission', 'En mission'),
    ('bloque', 'Bloqué'),
]
INITIAL_PROCESS_STATE = 'retour_maintenance'

# Closed transition table: (source, target)
LEGAL_TRANSITIONS = frozenset([
    ('retour_maintenance', 'maintenance_en_cours'),
    ('maintenance_en_cours', 'disponible_maintenance'),
    ('disponible_maintenance', 'verification_admin'),
    ('verification_admin', 'controle_obc'),
    ('verification_admin', 'bloque'),
    ('controle_obc', 'controle_hsse'),
    ('controle_obc', 'bloque'),
    ('controle_hsse', 'disponible'),
    ('controle_hsse', 'bloque'),
    ('disponible', 'en_mission'),
    ('en_mission', 'retour_maintenance'),
])

# Entry point -> required source state
ENTRY_POINT_SOURCES = {
    'start_maintenance_diagnostic': 'retour_maintenance',
    'finish_maintenance_diagnostic': 'maintenance_en_cours',
    'send_to_admin_review': 'disponible_maintenance',
    'finish_admin_check': 'verification_admin',
    'finish_obc_control': 'controle_obc',
    'finish_hsse_control': 'controle_hsse',
    'issue_delivery_order': 'disponible',
    'close_delivery_order': 'en_mission',
}

# Canonical vehicle status
VEHICLE_STATUSES = [
    ('disponible', 'Disponible'),
    ('indisponible', 'Indisponible'),
    ('validation_requise', 'Validation requise'),
]

# Validation workflow
STEP_TYPES = [
    ('maintenance', 'Maintenance'),
    ('administratif', 'Administratif'),
    ('hseq', 'HSEQ'),
    ('obc', 'OBC'),
]
STEP_OUTCOMES = [
    ('en_attente', 'En attente'),
    ('valide', 'Validé'),
    ('rejete', 'Rejeté'),
]

VERDICT_REJECTED = 'REJECTED'
VERDICT_APPROVED = 'APPROVED'
VERDICT_PENDING = 'PENDING'

# Verdict -> (status, validation_requise)
VERDICT_STATUS_MAP = {
    VERDICT_REJECTED: ('indisponible', False),
    VERDICT_APPROVED: ('disponible', False),
    VERDICT_PENDING: ('validation_requise', True),
}

VERDICT_GLOBAL_STATUS = {
    VERDICT_REJECTED: 'rejete',
    VERDICT_APPROVED: 'valide',
    VERDICT_PENDING: 'en_validation',
}

# Document expiry
ALERT_LEVELS = [
    ('valide', 'Valide'),
    ('a_renouveler', 'À renouveler'),
    ('expire', 'Expiré'),
]
DEFAULT_ALERT_DAYS = 30
DEFAULT_CRITICAL_DAYS = 7

# Department groups (capability ValidateStep(department))
STEP_GROUPS = {
    'maintenance': 'custom_fleet_sdbk.group_sdbk_maintenance',
    'administratif': 'custom_fleet_sdbk.group_sdbk_administratif',
    'hseq': 'custom_fleet_sdbk.group_sdbk_hseq',
    'obc': 'custom_fleet_sdbk.group_sdbk_obc',
}
TRANSPORT_GROUP = 'custom_fleet_sdbk.group_sdbk_transport'
MANAGER_GROUP = 'custom_fleet_sdbk.group_sdbk_manager'

# Context keys allowing guarded writes
CTX_STATUS_SYNC = 'sdbk_status_sync'
CTX_LIFECYCLE = 'sdbk_lifecycle'

# Default validity (months) of driver documents, from the issue date
DOCUMENT_VALIDITY_MONTHS = {
    'permis_conduire': 120,
    'visite_medicale': 12,
    'formation_adr': 60,
    'formation_hse': 36,
    'formation_conduite': 24,
    'carte_professionnelle': 60,
    'carte_identite': 120,
}

# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

from . import fleet_vehicle
from . import hr_employee
from . import fleet_sdbk_document
from . import fleet_validation_workflow
from . import fleet_validation_step
from . import fleet_validation_history
from . import fleet_sdbk_stage_mixin
from . import fleet_maintenance_diagnostic
from . import fleet_control_obc
from . import fleet_control_hsse
from . import fleet_delivery_order
from . import res_config_settings

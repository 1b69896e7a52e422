# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

from . import fleet_sdbk_access
from . import fleet_sdbk_notifier
from . import fleet_sdbk_storage
from . import fleet_sdbk_expiry
from . import fleet_sdbk_aggregator
from . import fleet_sdbk_status_sync
from . import fleet_sdbk_lifecycle

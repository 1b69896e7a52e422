# -*- coding: utf-8 -*-
# Part of Odoo. See LICENSE file for full copyright and licensing details.

from . import (
    test_document_expiry,
    test_sdbk_document,
    test_validation_aggregator,
    test_status_sync,
    test_lifecycle,
    test_security,
)

# HR Analytics - Intern, Housing and Department Analytics Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Business logic services."""

from .analytics_service import AnalyticsService
from .database_status import DatabaseStatusService

__all__ = ["AnalyticsService", "DatabaseStatusService"]

"""
services - Business-logic layer sitting between API and DB.
"""

from services.centers_service import CentersService         # noqa: F401
from services.reports_service import ReportsService         # noqa: F401
from services.dashboard_service import DashboardService     # noqa: F401
from services.errors import (                               # noqa: F401
    NotFoundError,
    ServiceError,
    ValidationError,
)

"""
db - Database layer.

Public API:
    init_db()       → create engine + tables
    get_session()   → new Session
    HealthcareCenter, MonthlyReport → ORM models
    SqlCenterStore, SqlReportStore  → import-engine stores
"""

from db.engine import init_db, get_session                          # noqa: F401
from db.models import Base, HealthcareCenter, MonthlyReport         # noqa: F401
from db.store import SqlCenterStore, SqlReportStore                 # noqa: F401

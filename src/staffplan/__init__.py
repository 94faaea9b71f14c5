"""
StaffPlan - Capacity Allocation & Utilization Engine

This package contains the StaffPlan backend services:
- capacity: work calendar, allocation resolver, utilization classifier, snapshots
- storage: SQLAlchemy models, Postgres adapter and repositories
- api: FastAPI REST endpoints
- platform: Cross-cutting concerns (configuration, logging)
"""

__version__ = "0.1.0"

"""NF-e import services: planning, reconciliation and orchestration."""

from asset_ingestion.services.import_service import NFeImportService
from asset_ingestion.services.planner import ImportPlanner
from asset_ingestion.services.reconciler import ImportReconciler

__all__ = ["NFeImportService", "ImportPlanner", "ImportReconciler"]

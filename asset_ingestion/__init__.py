"""
NF-e invoice import (``asset_ingestion``).

Turns the JSON output of the external NF-e extraction service into asset
records:

    adapters/   JSON -> InvoiceDocument
    domain/     frozen import types and pure validators
    services/   ImportPlanner, ImportReconciler, NFeImportService

Architecture: may import asset_kernel, asset_engines and asset_modules.
Nothing below it imports asset_ingestion.
"""

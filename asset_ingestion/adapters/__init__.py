"""Adapters turning external extraction output into invoice documents."""

from asset_ingestion.adapters.nfe_json_adapter import (
    load_invoice_document,
    parse_invoice_document,
)

__all__ = ["parse_invoice_document", "load_invoice_document"]

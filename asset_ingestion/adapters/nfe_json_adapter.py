"""
NF-e JSON adapter.

Turns the JSON object produced by the external NF-e extraction service into
an ``InvoiceDocument``.  Input keys are camelCase (``supplierCNPJ``,
``supplierName``, ``invoiceNumber``, ``emissionDate``, ``nfeTotalValue``,
``shippingValue``, ``products[{description, quantity, unitValue,
totalValue}]``).  Missing numbers default to 0, missing strings to "",
missing products to an empty list.  Numbers go through ``Decimal(str(x))``.
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Mapping

from asset_kernel.domain.dtos import RowError
from asset_kernel.domain.values import Money
from asset_kernel.exceptions import ValidationError
from asset_kernel.logging_config import get_logger
from asset_modules.assets.helpers import INVALID_FIELD, normalize_tax_id

from asset_ingestion.domain.types import InvoiceDocument, InvoiceProduct

logger = get_logger("ingestion.nfe_json_adapter")


def _to_decimal(
    value: Any,
    field: str,
    errors: list[RowError],
    row_index: int | None = None,
) -> Decimal:
    """Parse a non-negative number; record a RowError and return 0 on failure."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return Decimal("0")
    if isinstance(value, bool):
        errors.append(RowError(
            code=INVALID_FIELD, row_index=row_index, field=field,
            message=f"{field} must be a number, got {value!r}",
        ))
        return Decimal("0")
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation:
        errors.append(RowError(
            code=INVALID_FIELD, row_index=row_index, field=field,
            message=f"{field} is not a number: {value!r}",
        ))
        return Decimal("0")
    if not result.is_finite():
        errors.append(RowError(
            code=INVALID_FIELD, row_index=row_index, field=field,
            message=f"{field} is not a finite number: {value!r}",
        ))
        return Decimal("0")
    if result < 0:
        errors.append(RowError(
            code=INVALID_FIELD, row_index=row_index, field=field,
            message=f"{field} cannot be negative: {value!r}",
        ))
    return result


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _to_datetime(value: Any, errors: list[RowError]) -> datetime | None:
    text = _to_text(value)
    if not text:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        errors.append(RowError(
            code=INVALID_FIELD, field="emissionDate",
            message=f"emissionDate is not ISO 8601: {text!r}",
        ))
        return None


def parse_invoice_document(
    data: Mapping[str, Any],
    currency: str = "BRL",
) -> InvoiceDocument:
    """
    Build an InvoiceDocument from the extraction output.

    Raises:
        ValidationError: negative or unparseable numbers, bad dates, or a
            malformed products list.  Every problem is reported at once.
    """
    errors: list[RowError] = []

    raw_products = data.get("products") or []
    if not isinstance(raw_products, list):
        errors.append(RowError(
            code=INVALID_FIELD, field="products",
            message="products must be a list",
        ))
        raw_products = []

    products: list[InvoiceProduct] = []
    for index, raw in enumerate(raw_products):
        if not isinstance(raw, Mapping):
            errors.append(RowError(
                code=INVALID_FIELD, row_index=index, field="products",
                message="product entry must be an object",
            ))
            continue
        quantity = _to_decimal(raw.get("quantity"), "quantity", errors, index)
        unit_value = _to_decimal(raw.get("unitValue"), "unitValue", errors, index)
        total_value = _to_decimal(raw.get("totalValue"), "totalValue", errors, index)
        products.append(InvoiceProduct(
            description=_to_text(raw.get("description")),
            quantity=quantity,
            unit_value=Money.of(unit_value, currency),
            total_value=Money.of(total_value, currency),
        ))

    total = _to_decimal(data.get("nfeTotalValue"), "nfeTotalValue", errors)
    freight = _to_decimal(data.get("shippingValue"), "shippingValue", errors)
    emission = _to_datetime(data.get("emissionDate"), errors)

    if errors:
        logger.warning("invoice_document_rejected", extra={
            "error_count": len(errors),
            "fields": sorted({e.field or "" for e in errors}),
        })
        raise ValidationError(errors)

    document = InvoiceDocument(
        supplier_cnpj=normalize_tax_id(_to_text(data.get("supplierCNPJ"))),
        supplier_name=_to_text(data.get("supplierName")),
        invoice_number=_to_text(data.get("invoiceNumber")),
        emission_date=emission,
        total_value=Money.of(total, currency),
        freight_value=Money.of(freight, currency),
        products=tuple(products),
    )
    logger.info("invoice_document_parsed", extra={
        "invoice_number": document.invoice_number,
        "product_count": len(document.products),
        "freight_value": str(freight),
    })
    return document


def load_invoice_document(
    source_path: Path | str,
    currency: str = "BRL",
    encoding: str = "utf-8",
) -> InvoiceDocument:
    """Read a JSON file holding one extraction output object."""
    path = Path(source_path)
    with path.open("r", encoding=encoding) as f:
        data = json.load(f)
    if not isinstance(data, Mapping):
        raise ValidationError([RowError(
            code=INVALID_FIELD, field="document",
            message=f"{path.name} must contain a JSON object",
        )])
    return parse_invoice_document(data, currency=currency)

"""
Currency -- the ISO 4217 codes a registry may be kept in, with the minor
unit (decimal places) that book values are rounded to.

The registry holds one currency at a time (BRL for NF-e imports).  The
table below lists the codes ``AssetConfig.currency_code`` accepts.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar


@dataclass(frozen=True)
class CurrencyInfo:
    """Minor unit and display name of one currency."""

    code: str
    decimal_places: int
    name: str

    @property
    def quantum(self) -> Decimal:
        """Smallest representable amount: ``Decimal("0.01")`` for BRL, 1 for CLP."""
        return Decimal(1).scaleb(-self.decimal_places)


class CurrencyRegistry:
    """Lookup of supported currencies by code (case and whitespace ignored)."""

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        info.code: info
        for info in (
            CurrencyInfo("BRL", 2, "Brazilian Real"),
            CurrencyInfo("USD", 2, "US Dollar"),
            CurrencyInfo("EUR", 2, "Euro"),
            CurrencyInfo("ARS", 2, "Argentine Peso"),
            CurrencyInfo("CLP", 0, "Chilean Peso"),
            CurrencyInfo("PYG", 0, "Paraguayan Guarani"),
            CurrencyInfo("UYU", 2, "Uruguayan Peso"),
        )
    }

    @staticmethod
    def _normalize(code: object) -> str:
        return code.upper().strip() if isinstance(code, str) else ""

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        return cls._CURRENCIES.get(cls._normalize(code))

    @classmethod
    def is_valid(cls, code: str) -> bool:
        return cls.get_info(code) is not None

    @classmethod
    def validate(cls, code: str) -> str:
        """
        Return the normalized code.

        Raises:
            ValueError: ``code`` is not a supported currency.
        """
        info = cls.get_info(code)
        if info is None:
            supported = ", ".join(sorted(cls._CURRENCIES))
            raise ValueError(f"Unsupported currency {code!r} (expected one of {supported})")
        return info.code

"""
Values -- Currency and Money, the types of every purchase value, freight
share and book value in the registry.

Invariants enforced:
    - Amounts are Decimal.  Floats are refused at construction so a binary
      rounding error can never reach a book value.
    - Currency codes are checked against ``CurrencyRegistry``.
    - Arithmetic and comparison between two amounts require one currency.
    - Nothing rounds implicitly; ``round()`` quantizes to the minor unit
      with ROUND_HALF_UP.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from asset_kernel.domain.currency import CurrencyRegistry


@dataclass(frozen=True, slots=True)
class Currency:
    """A supported ISO 4217 code, normalized to upper case."""

    code: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", CurrencyRegistry.validate(self.code))

    @property
    def decimal_places(self) -> int:
        return CurrencyRegistry.get_info(self.code).decimal_places

    @property
    def quantum(self) -> Decimal:
        return CurrencyRegistry.get_info(self.code).quantum

    def __str__(self) -> str:
        return self.code


def _to_decimal(value: Decimal | int | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        raise TypeError(f"Refusing float amount {value!r}; pass a str or Decimal")
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {value!r}") from exc


@dataclass(frozen=True, slots=True)
class Money:
    """
    A Decimal amount in one currency.

    Supports ``+``/``-`` between amounts of the same currency, ``*`` and
    ``/`` by a scalar, and ordering.  Mixing currencies raises ValueError.
    """

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _to_decimal(self.amount))
        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))
        elif not isinstance(self.currency, Currency):
            raise TypeError(f"currency must be Currency or str, got {type(self.currency)}")

    @classmethod
    def of(cls, amount: Decimal | str | int, currency: str | Currency) -> Money:
        """Build from a Decimal, int or numeric string."""
        return cls(amount=_to_decimal(amount), currency=currency)

    @classmethod
    def zero(cls, currency: str | Currency) -> Money:
        return cls(amount=Decimal("0"), currency=currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    def round(self, rounding: str = ROUND_HALF_UP) -> Money:
        """Quantize to the currency's minor unit."""
        quantized = self.amount.quantize(self.currency.quantum, rounding=rounding)
        return Money(amount=quantized, currency=self.currency)

    # -- arithmetic ------------------------------------------------------------

    def _same_currency(self, other: Money, verb: str) -> None:
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot {verb} {self.currency} and {other.currency} amounts"
            )

    def _combine(self, other: object, op, verb: str):
        if not isinstance(other, Money):
            return NotImplemented
        self._same_currency(other, verb)
        return op(self.amount, other.amount)

    def __add__(self, other: Money) -> Money:
        result = self._combine(other, operator.add, "add")
        if result is NotImplemented:
            return result
        return Money(amount=result, currency=self.currency)

    def __sub__(self, other: Money) -> Money:
        result = self._combine(other, operator.sub, "subtract")
        if result is NotImplemented:
            return result
        return Money(amount=result, currency=self.currency)

    def __neg__(self) -> Money:
        return Money(amount=-self.amount, currency=self.currency)

    def __mul__(self, factor: Decimal | int | str) -> Money:
        if isinstance(factor, (Money, float)):
            return NotImplemented
        return Money(amount=self.amount * _to_decimal(factor), currency=self.currency)

    __rmul__ = __mul__

    def __truediv__(self, divisor: Decimal | int | str) -> Money:
        if isinstance(divisor, (Money, float)):
            return NotImplemented
        return Money(amount=self.amount / _to_decimal(divisor), currency=self.currency)

    def __lt__(self, other: Money) -> bool:
        return self._combine(other, operator.lt, "compare")

    def __le__(self, other: Money) -> bool:
        return self._combine(other, operator.le, "compare")

    def __gt__(self, other: Money) -> bool:
        return self._combine(other, operator.gt, "compare")

    def __ge__(self, other: Money) -> bool:
        return self._combine(other, operator.ge, "compare")

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def __repr__(self) -> str:
        return f"Money({str(self.amount)!r}, {self.currency.code!r})"

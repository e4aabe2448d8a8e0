"""
Fixed Assets Configuration Schema.

Defines the structure and defaults for registry settings: the registry
currency, NF-e import behavior (freight dilution) and portfolio summary
options.  Actual values are loaded from a YAML settings file at runtime
(see ``asset_config.loader``).
"""

from dataclasses import dataclass, field, fields
from typing import Self

from asset_engines.freight import FreightScope
from asset_kernel.domain.currency import CurrencyRegistry
from asset_kernel.logging_config import get_logger

logger = get_logger("modules.assets.config")


@dataclass(frozen=True)
class ImportSettings:
    """
    NF-e import behavior.

    Freight is not diluted into unit costs unless ``allocate_freight`` is
    set; when it is, ``freight_scope`` picks the proportioning denominator.
    """

    allocate_freight: bool = False
    freight_scope: FreightScope = FreightScope.ALL_INVOICE_ITEMS

    def __post_init__(self):
        if not isinstance(self.freight_scope, FreightScope):
            object.__setattr__(self, "freight_scope", FreightScope(self.freight_scope))


@dataclass
class AssetConfig:
    """
    Configuration schema for the asset registry.

    Override at instantiation with company-specific values:

        config = AssetConfig(
            currency_code="BRL",
            import_settings=ImportSettings(allocate_freight=True),
        )
    """

    # Single registry currency
    currency_code: str = "BRL"

    # NF-e import
    import_settings: ImportSettings = field(default_factory=ImportSettings)

    # Reporting
    exclude_archived_from_summary: bool = False

    def __post_init__(self):
        self.currency_code = CurrencyRegistry.validate(self.currency_code)
        logger.info(
            "asset_config_initialized",
            extra={
                "currency_code": self.currency_code,
                "allocate_freight": self.import_settings.allocate_freight,
                "freight_scope": self.import_settings.freight_scope.value,
                "exclude_archived_from_summary": self.exclude_archived_from_summary,
            },
        )

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with the registry defaults (BRL, no freight dilution)."""
        logger.info("asset_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create config from dictionary (e.g., loaded from a settings file).

        Raises:
            ValueError: Unknown keys, or invalid currency/freight scope.
        """
        logger.info(
            "asset_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        data = dict(data)
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown asset config keys: {unknown}")

        if "import_settings" in data and isinstance(data["import_settings"], dict):
            settings = dict(data["import_settings"])
            allowed = {f.name for f in fields(ImportSettings)}
            extra = sorted(set(settings) - allowed)
            if extra:
                raise ValueError(f"Unknown import_settings keys: {extra}")
            data["import_settings"] = ImportSettings(**settings)
        return cls(**data)

"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from ..data.instruments import DEFAULT_INSTRUMENTS, InstrumentRegistry
from ..data.models import Instrument, MarketClass
from ..errors import ConfigurationError
from .defaults import (
    AnalysisParams,
    DefaultConfig,
    EtaParams,
    FeedParams,
    OrchestratorParams,
    ScoringParams,
    TimeframeParams,
    get_default_config,
)
from .validation import ConfigValidator

_SECTIONS = {
    "feed": FeedParams,
    "orchestrator": OrchestratorParams,
    "scoring": ScoringParams,
    "timeframes": TimeframeParams,
    "eta": EtaParams,
    "analysis": AnalysisParams,
}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Union[str, Path, None] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def _load_yaml(self, filename: str) -> dict[str, Any]:
        path = self.config_dir / filename
        if not path.exists():
            return {}

        with open(path) as f:
            data = yaml.safe_load(f)

        return data or {}

    def load_settings(self) -> dict[str, Any]:
        """Load global overrides from settings.yaml."""
        return self._load_yaml("settings.yaml")

    def load_instrument_config(self, symbol: str) -> dict[str, Any]:
        """Load symbol-specific reference data overrides."""
        instruments_config = self._load_yaml("instruments.yaml")
        return instruments_config.get("instruments", {}).get(symbol, {})  # type: ignore[no-any-return]

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. settings.yaml
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_settings())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def build_config(self, overrides: Optional[dict[str, Any]] = None) -> DefaultConfig:
        """
        Build a validated configuration object.

        Raises:
            ConfigurationError: If any merged value fails validation
        """
        config = self.merge_config(overrides)

        errors = ConfigValidator.validate_config(config)
        if errors:
            raise ConfigurationError(
                "Configuration validation failed",
                errors=[f"{err.field}: {err.message} (got: {err.value})" for err in errors]
            )

        sections = {}
        for name, section_cls in _SECTIONS.items():
            try:
                sections[name] = section_cls(**config.get(name, {}))
            except TypeError as e:
                raise ConfigurationError(
                    f"Unknown parameter in section '{name}'",
                    errors=[str(e)]
                ) from e

        return DefaultConfig(**sections)

    def build_instruments(self, params: Optional[FeedParams] = None) -> InstrumentRegistry:
        """
        Build the instrument universe with instruments.yaml overrides applied.

        Symbols absent from the default universe must define every field.

        Raises:
            ConfigurationError: If an override is invalid or incomplete
        """
        overrides = self._load_yaml("instruments.yaml").get("instruments", {})
        instruments = {instrument.symbol: instrument for instrument in DEFAULT_INSTRUMENTS}

        for symbol, values in overrides.items():
            errors = ConfigValidator.validate_instrument_params(values or {})
            if errors:
                raise ConfigurationError(
                    f"Invalid overrides for instrument {symbol}",
                    errors=[f"{err.field}: {err.message} (got: {err.value})" for err in errors]
                )
            instruments[symbol] = self._apply_instrument_overrides(symbol, instruments.get(symbol), values or {})

        return InstrumentRegistry(instruments.values(), params)

    def _apply_instrument_overrides(
        self,
        symbol: str,
        base: Optional[Instrument],
        values: dict[str, Any]
    ) -> Instrument:
        fields = dict(values)
        if "market_class" in fields:
            fields["market_class"] = MarketClass.coerce(fields["market_class"])

        if base is not None:
            return replace(base, **fields)

        missing = [name for name in ("market_class", "base_price", "volatility", "tick_size") if name not in fields]
        if missing:
            raise ConfigurationError(
                f"Instrument {symbol} is not in the default universe and lacks fields",
                errors=missing
            )
        return Instrument(symbol=symbol, **fields)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name, _field in obj.__dataclass_fields__.items():
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                elif isinstance(value, dict):
                    result[field_name] = dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

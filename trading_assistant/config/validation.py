"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from ..data.models import MarketClass

_INSTRUMENT_FIELDS = {"market_class", "base_price", "volatility", "tick_size"}


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_feed_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate price feed parameters."""
        errors = []

        # Validate cadence_seconds
        if "cadence_seconds" in params:
            value = params["cadence_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="cadence_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        # Validate history_size
        if "history_size" in params:
            value = params["history_size"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="history_size",
                    message="Must be a positive integer",
                    value=value
                ))

        # Validate fallback instrument values
        for name in ("default_base_price", "default_tick_size"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive number",
                        value=value
                    ))

        if "default_volatility" in params:
            value = params["default_volatility"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="default_volatility",
                    message="Must be a non-negative number",
                    value=value
                ))

        # Validate random walk weights
        for name in ("trend_weight", "noise_weight"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0 or value > 1:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a number between 0 and 1",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_orchestrator_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate recompute orchestration parameters."""
        errors = []

        for name in ("live_interval_seconds", "stop_join_timeout_seconds"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive number",
                        value=value
                    ))

        for name in ("refresh_snapshot_on_timer", "auto_start_feed"):
            if name in params:
                value = params[name]
                if not isinstance(value, bool):
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a boolean",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_timeframe_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate timeframe duration table."""
        errors = []

        durations = params.get("durations", {})
        if not isinstance(durations, dict):
            errors.append(ValidationError(
                field="durations",
                message="Must be a mapping of timeframe to minutes",
                value=durations
            ))
            durations = {}

        for timeframe, minutes in durations.items():
            if not isinstance(minutes, int) or isinstance(minutes, bool) or minutes <= 0:
                errors.append(ValidationError(
                    field=f"durations.{timeframe}",
                    message="Must be a positive integer number of minutes",
                    value=minutes
                ))

        if "default_duration" in params:
            value = params["default_duration"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="default_duration",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_instrument_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate per-instrument reference data overrides."""
        errors = []

        for name in sorted(set(params) - _INSTRUMENT_FIELDS):
            errors.append(ValidationError(
                field=name,
                message="Unknown instrument field",
                value=params[name]
            ))

        if "market_class" in params and MarketClass.coerce(params["market_class"]) is None:
            errors.append(ValidationError(
                field="market_class",
                message=f"Must be one of {[m.value for m in MarketClass]}",
                value=params["market_class"]
            ))

        for name in ("base_price", "tick_size"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive number",
                        value=value
                    ))

        if "volatility" in params:
            value = params["volatility"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="volatility",
                    message="Must be a non-negative number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "feed" in config:
            errors.extend(ConfigValidator.validate_feed_params(config["feed"]))

        if "orchestrator" in config:
            errors.extend(ConfigValidator.validate_orchestrator_params(config["orchestrator"]))

        if "timeframes" in config:
            errors.extend(ConfigValidator.validate_timeframe_params(config["timeframes"]))

        return errors

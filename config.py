"""
Configuration Module
====================
Centralized environment variable loading, validation, and access.
Validates all pricing configuration at startup to fail fast.

NO PRICING LOGIC - Pure configuration management only.
"""

import os
import logging
from decimal import Decimal, InvalidOperation
from typing import Optional, Dict, Any, List
from pathlib import Path
from dotenv import load_dotenv


# ============================================================================
# LOGGING
# ============================================================================

logger = logging.getLogger(__name__)


# ============================================================================
# ENVIRONMENT LOADING
# ============================================================================

def load_environment():
    """
    Load environment variables from .env file if present.
    Safe to call multiple times.
    """
    env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path)
        logger.info("Loaded environment from .env file")
    else:
        logger.debug("No .env file found, using system environment variables")


# Load on module import
load_environment()


# ============================================================================
# CONFIGURATION EXCEPTION
# ============================================================================

class InvalidConfiguration(ValueError):
    """Raised when a rule or the environment is configured with an invalid value."""
    pass


# ============================================================================
# VALIDATION HELPERS
# ============================================================================

def to_money(value: Any, field_name: str = "amount") -> Decimal:
    """
    Normalize a monetary value to Decimal.

    Floats go through str() so that 0.1 stays 0.1.

    Raises:
        InvalidConfiguration: If value is not a finite number
    """
    if isinstance(value, bool):
        raise InvalidConfiguration(f"Invalid {field_name}: {value!r}")

    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise InvalidConfiguration(f"Invalid {field_name}: {value!r}")

    if not amount.is_finite():
        raise InvalidConfiguration(f"Invalid {field_name}: {value!r}")

    return amount


def _get_optional_env(key: str, default: str = None) -> Optional[str]:
    """
    Get optional environment variable.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value or default
    """
    value = os.getenv(key, default)
    return value.strip() if value else default


def _get_bool_env(key: str, default: bool = False) -> bool:
    """
    Get boolean environment variable.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Boolean value
    """
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes", "on", "enabled")


def _get_decimal_env(key: str, default: str) -> Decimal:
    """
    Get decimal environment variable.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Decimal value

    Raises:
        InvalidConfiguration: If value is not a valid number
    """
    value = os.getenv(key)

    if not value or value.strip() == "":
        return Decimal(default)

    try:
        return to_money(value, field_name=key)
    except InvalidConfiguration:
        raise InvalidConfiguration(
            f"Invalid decimal value for {key}: {value}"
        )


# ============================================================================
# CONFIGURATION SECTIONS
# ============================================================================

class DeliveryConfig:
    """Delivery fee configuration."""

    def __init__(self):
        self.fee = _get_decimal_env("DELIVERY_FEE", "200")
        self.free_threshold = _get_decimal_env("FREE_DELIVERY_THRESHOLD", "1000")

        if self.fee < 0:
            raise InvalidConfiguration(
                f"DELIVERY_FEE must be non-negative: {self.fee}"
            )

        if self.free_threshold < 0:
            raise InvalidConfiguration(
                f"FREE_DELIVERY_THRESHOLD must be non-negative: {self.free_threshold}"
            )


class PromotionConfig:
    """Automatic promotion configuration."""

    def __init__(self):
        self.enabled = _get_bool_env("PROMOTIONS_ENABLED", True)

        # Free e-book handed out by the two-paper-books promotion
        self.reward_book_name = _get_optional_env(
            "REWARD_BOOK_NAME", "Master and Margarita"
        )
        self.reward_book_author = _get_optional_env(
            "REWARD_BOOK_AUTHOR", "Bulgakov"
        )
        self.reward_book_price = _get_decimal_env("REWARD_BOOK_PRICE", "100")

        if self.reward_book_price < 0:
            raise InvalidConfiguration(
                f"REWARD_BOOK_PRICE must be non-negative: {self.reward_book_price}"
            )


class LoggingConfig:
    """Logging configuration."""

    def __init__(self):
        self.log_level = _get_optional_env("LOG_LEVEL", "INFO").upper()

        if self.log_level not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise InvalidConfiguration(
                f"Invalid LOG_LEVEL: {self.log_level}"
            )


# ============================================================================
# MAIN CONFIGURATION CLASS
# ============================================================================

class Config:
    """
    Main configuration container.
    Loads and validates all configuration on initialization.
    """

    def __init__(self):
        """
        Initialize and validate all configuration.

        Raises:
            InvalidConfiguration: If any configuration value is invalid
        """
        try:
            self.delivery = DeliveryConfig()
            self.promotions = PromotionConfig()
            self.logging = LoggingConfig()

            logger.debug("Configuration loaded and validated successfully")

        except InvalidConfiguration as e:
            logger.error(f"Configuration error: {str(e)}")
            raise

    def get_safe_summary(self) -> Dict[str, Any]:
        """
        Get configuration summary.

        Returns:
            Dictionary with configuration values (as strings for money)
        """
        return {
            "delivery": {
                "fee": str(self.delivery.fee),
                "free_threshold": str(self.delivery.free_threshold),
            },
            "promotions": {
                "enabled": self.promotions.enabled,
                "reward_book": self.promotions.reward_book_name,
                "reward_author": self.promotions.reward_book_author,
                "reward_price": str(self.promotions.reward_book_price),
            },
            "log_level": self.logging.log_level,
        }

    def validate_runtime_dependencies(self) -> List[str]:
        """
        Check for settings that are valid but probably unintended.

        Returns:
            List of warnings (empty if all OK)
        """
        warnings = []

        if self.delivery.fee == 0:
            warnings.append("DELIVERY_FEE is 0: delivery is always free")

        if self.delivery.free_threshold == 0:
            warnings.append("FREE_DELIVERY_THRESHOLD is 0: delivery is always free")

        if not self.promotions.enabled:
            warnings.append("Automatic promotions are disabled")

        return warnings


# ============================================================================
# SINGLETON INSTANCE
# ============================================================================

# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get global configuration instance.
    Initializes on first call.

    Returns:
        Config instance

    Raises:
        InvalidConfiguration: If configuration is invalid
    """
    global _config

    if _config is None:
        _config = Config()

    return _config


def reload_config() -> Config:
    """
    Reload configuration from environment.
    Useful for testing or dynamic reconfiguration.
    """
    global _config
    load_environment()
    _config = Config()
    logger.info("Configuration reloaded")
    return _config


# ============================================================================
# VALIDATION FUNCTION
# ============================================================================

def validate_configuration():
    """
    Validate configuration and log summary.
    Useful for startup checks.

    Raises:
        InvalidConfiguration: If configuration is invalid
    """
    config = get_config()
    summary = config.get_safe_summary()

    logger.info("Configuration Summary:")
    logger.info(f"  Delivery fee: {summary['delivery']['fee']}")
    logger.info(f"  Free delivery from: {summary['delivery']['free_threshold']}")
    logger.info(f"  Promotions enabled: {summary['promotions']['enabled']}")
    logger.info(
        f"  Reward book: {summary['promotions']['reward_book']} "
        f"({summary['promotions']['reward_price']})"
    )
    logger.info(f"  Log Level: {summary['log_level']}")

    warnings = config.validate_runtime_dependencies()
    if warnings:
        logger.warning("Configuration warnings:")
        for warning in warnings:
            logger.warning(f"  - {warning}")

    logger.info("Configuration validation complete")

"""Marketplace domain — composition root.

Identity, catalogue and ordering live in a single Protean domain so that a
checkout can touch users, products, stores, carts and orders inside one
Unit of Work.
"""

from protean.domain import Domain

from marketplace.config import get_settings
from marketplace.utils.logging import configure_logging, get_logger

# Configure logging for the application
_settings = get_settings()
configure_logging(_settings.environment, level=_settings.log_level)

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
marketplace = Domain(name="marketplace")

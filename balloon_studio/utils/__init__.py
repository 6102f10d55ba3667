"""Utility modules."""

from balloon_studio.utils.logging import InventoryLogger, get_logger, setup_logging

__all__ = ["setup_logging", "get_logger", "InventoryLogger"]

"""
Managers for configuration
"""

from .config_manager import ConfigManager
from .catalog_manager import CatalogManager

__all__ = ['ConfigManager', 'CatalogManager']

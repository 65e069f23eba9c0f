"""
Infrastructure module exports.

Configuration and bootstrap for the bot's services.
"""

from .config import BotConfig, get_config, RegistryBackendType
from .bootstrap import BotBootstrap, bootstrap_bot

__all__ = [
    "BotConfig",
    "get_config",
    "RegistryBackendType",
    "BotBootstrap",
    "bootstrap_bot",
]

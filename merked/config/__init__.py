"""
Runtime Configuration Module

Provides configuration loading and management for merked.
"""

from .runtime import RuntimeConfig, DagConfig, CLIConfig, load_config, get_default_config

__all__ = [
    "RuntimeConfig",
    "DagConfig",
    "CLIConfig",
    "load_config",
    "get_default_config",
]

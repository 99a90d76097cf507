"""
Configuration management for clavix.
"""

from .intelligence_config import IntelligenceConfig, load_config, save_config

__all__ = ["IntelligenceConfig", "load_config", "save_config"]

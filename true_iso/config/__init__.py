"""Configuration module for true-iso."""

from .config_loader import get_config, reload_config, get_correction_config
from .models import CorrectionConfig, RatioSpec

__all__ = ['get_config', 'reload_config', 'get_correction_config', 'CorrectionConfig', 'RatioSpec']

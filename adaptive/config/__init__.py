"""Configuration loading and evaluation limits."""

from .settings import EvaluationLimits
from .loaders import ConfigLoader, DataLoader

__all__ = ["EvaluationLimits", "ConfigLoader", "DataLoader"]

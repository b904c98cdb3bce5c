"""
Application Layer - Use Cases and Services

This package contains the price pipeline services: derivation, the
per-source state store, the price engine and the gold calculator.
"""

from goldrate.application.calculator import GoldValuation, calculate_value, to_grams
from goldrate.application.derivation import derive_metrics
from goldrate.application.price_engine import PriceEngine
from goldrate.application.state_manager import SourceState, StateManager

__all__ = [
    "GoldValuation",
    "calculate_value",
    "to_grams",
    "derive_metrics",
    "PriceEngine",
    "SourceState",
    "StateManager",
]

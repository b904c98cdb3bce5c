"""
Domain Layer - Pure Business Objects

This package contains domain models, the price source registry and
business errors. No dependencies on infrastructure or external systems.
"""

from goldrate.domain.models import (
    KARAT_PURITY,
    ChangeIndicator,
    GoldMetrics,
    GramPriceEntry,
    KaratInfo,
    PriceSource,
    SilverMetric,
    SpotMetric,
    karat_label,
)
from goldrate.domain.errors import (
    DomainError,
    EmptyExtractionError,
    FetchFailure,
    PersistenceError,
    ProxyExhaustedError,
    UnknownSourceError,
)
from goldrate.domain.sources import DEFAULT_SLUG, DEFAULT_SOURCES, SourceRegistry, default_registry

__all__ = [
    "KARAT_PURITY",
    "ChangeIndicator",
    "GoldMetrics",
    "GramPriceEntry",
    "KaratInfo",
    "PriceSource",
    "SilverMetric",
    "SpotMetric",
    "karat_label",
    "DomainError",
    "EmptyExtractionError",
    "FetchFailure",
    "PersistenceError",
    "ProxyExhaustedError",
    "UnknownSourceError",
    "DEFAULT_SLUG",
    "DEFAULT_SOURCES",
    "SourceRegistry",
    "default_registry",
]

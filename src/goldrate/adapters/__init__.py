"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Crawlers (proxy fetching, markup parsing)
- Providers (exchange rates)
- Persistence (price history storage)
- Formatting (text output)
"""

__all__ = []

"""
Momentum application-specific code.

This package contains the Momentum productivity backend:
- productivity: Monthly productivity scoring (aggregation, scoring,
  validation, caching, history)
- config: Application settings

Uses generic infrastructure from the common/ package.
"""

from app.config import settings

__all__ = ["settings"]

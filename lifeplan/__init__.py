"""
Life Plan - Financial Projection Engine

A single, testable engine for multi-decade household finances:
account balances, investment holdings, dividends, FIRE goal detection
and report rollups.

DESIGN PRINCIPLES:
1. Inputs are immutable snapshots, outputs are freshly built
2. One bad record never aborts a projection
3. No silent corrections - every clamp or gap becomes a diagnostic
4. Settings are passed in, never looked up from deep inside the engine
5. Data source is swappable
"""

__version__ = "1.0.0"
__author__ = "Life Plan Team"

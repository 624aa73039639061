"""
Swap Insights — wallet trading-pattern profiles from DEX swap history.

Turns a wallet's swap events into a behavioral profile (token and pool
preferences, sizing consistency, rhythm, timing, personality), decides
whether a fresh profile is worth persisting to the content-addressed
store, and summarizes how a wallet's profile evolves over time.
"""

__version__ = "0.1.0"

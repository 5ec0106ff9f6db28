"""
Flight Aggregator - best one-way flight offers across several vendors.

This package queries every configured flight vendor concurrently, normalizes
their responses into one offer model, ranks the merged offers by price and
by duration, and caches the ranking.
"""

__version__ = "0.1.0"

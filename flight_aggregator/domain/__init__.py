"""
Domain package for the Flight Aggregator.

This package contains the search request and the canonical offer models that
every vendor response is normalized into. The domain layer is independent of
vendors, caches and the web framework.
"""

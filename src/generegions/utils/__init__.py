"""General utilities for generegions."""

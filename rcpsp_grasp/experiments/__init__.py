"""Batch experiment utilities (runner and CSV aggregation)."""

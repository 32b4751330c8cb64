"""Execution modes: shared parameters and the population driver."""

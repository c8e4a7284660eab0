"""Shared infrastructure for vcal_lite."""

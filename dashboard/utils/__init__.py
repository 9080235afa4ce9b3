"""Formatting and API helpers for the dashboard."""

"""Dashboards and instructor analytics."""

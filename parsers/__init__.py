"""Importers for duty-log exports."""

"""Data models and boundary schemas for the FTL engine."""

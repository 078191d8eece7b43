"""Data models for DailyVault."""

"""Service layer for DailyVault."""

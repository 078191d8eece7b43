"""REST API client for the DailyVault server."""

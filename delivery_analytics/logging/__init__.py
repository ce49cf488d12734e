"""API request logging persisted to the `log` table."""

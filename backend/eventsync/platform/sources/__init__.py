"""Source connectors built on the sync domain."""

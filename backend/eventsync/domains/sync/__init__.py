"""Sync domain: page fetching, the pagination/retry driver, and row mapping.

Use ``SyncDriver`` from ``eventsync.domains.sync.driver`` with a fetcher
factory; ``EventbriteSource`` wires one up for the real API.
"""

"""Eventsync: incremental, cursor-paginated Eventbrite synchronization client."""

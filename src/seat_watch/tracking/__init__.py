"""
Tracking subsystem.

Components:
- models.py: data structures (TrackedItem, AvailabilityStatus) + input normalization
- store.py: in-memory per-user store with per-user locks
- poller.py: periodic sweep that refreshes status and reports closed -> open transitions
- runner.py: background thread hosting the poller's event loop
- api.py: small high-level helpers used by the command layer
"""

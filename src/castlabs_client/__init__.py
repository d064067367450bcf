"""Castlabs DRMtoday client.

Client library for the Castlabs DRMtoday key-management service. Handles the
CAS ticket-granting login and the authenticated JSON requests used to ingest
keys and manage merchant accounts.
"""

__version__ = "0.1.0"

"""
Fee Portal

Python client for the school fee-management backend: an authenticated HTTP
client, one API class per resource, async fetch helpers and client-side
fee summaries.
"""

__version__ = "1.0.0"

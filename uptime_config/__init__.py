"""
uptime-config — Configuration editor backend for an uptime status page.

Stores the configuration document in an authoritative key-value store and
mirrors it, best-effort, to uptime.config.ts in a GitHub repository.
"""

__version__ = "0.1.0"

"""
SentinelSight server package.

This package contains the management API of the surveillance platform:
- sites, cameras, zones and rules configuration
- event and detection storage written by the external detection service
- alert subscriptions, notifications and audit logs
"""

__version__ = "0.1.0"

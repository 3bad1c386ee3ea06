"""
metactl.

Administration client for a remote server's meta RPC service, plus the
server side of that service.
"""

__version__ = "0.1.0"

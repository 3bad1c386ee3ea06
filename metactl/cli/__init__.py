"""
CLI Client Module.

Command-line administration client built with Typer for querying the
remote server's meta RPC service.

Architecture:
- CLI is a thin presentation layer
- Remote commands live in a CommandRegistry built at startup
- All remote commands share one RemoteClientProvider (endpoint, client, context)
- RPC calls go over HTTP (httpx) with X-Frontend-ID: cli

Usage:
    metactl --help
    metactl meta status
    metactl --endpoint https://meta.example.com meta config
    metactl server start
"""

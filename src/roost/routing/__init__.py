"""Routing: route patterns, endpoint registration and the dispatcher.

Endpoints are validated when created and compiled into a read-only
per-method table when the router is built.
"""

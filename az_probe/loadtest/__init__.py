"""Locust integration for the AZ probe.

Locust monkey-patches the standard library on import, so only the
modules that need it (user, shapes, listeners) import locust. Locustfiles
import those modules directly.
"""

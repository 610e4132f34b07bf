"""Endpoint modules for the rover data gateway.

Internal to marsdash and may change at any time.
"""

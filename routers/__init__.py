"""
API Routers
Version: 1.0

Mounted under /api by main.py.
"""

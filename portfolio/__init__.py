"""
Backend package for the portfolio site.

A FastAPI application serving the profile and project content, admin
login, analytics events and the contact form, on top of a store that is
either SQLite-backed or in-memory.
"""

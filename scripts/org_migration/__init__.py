"""Clerk organization migration.

Reads organization records from a JSON export, validates each one and
creates it in a Clerk instance through the Backend API, with rate-limit
backoff and a run-scoped failure log.
"""

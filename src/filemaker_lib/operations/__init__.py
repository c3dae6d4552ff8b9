"""Operational helpers for the FileMaker client.

Contains request shaping and response unwrapping for the Data API:
- ``common``: URL builders, type aliases, and envelope helpers
- ``records``: Find, sort, and field-data bodies plus record helpers
- ``discovery``: Database and layout listing, database deletion
"""

"""Client package for the FileMaker Data API.

Provides HTTP client setup, session handling, and the client handle:
- ``http``: Factories for configured ``httpx.AsyncClient`` instances
- ``session``: Session token acquisition, storage, and logout
- ``filemaker``: The ``Filemaker`` handle with record and discovery calls
"""

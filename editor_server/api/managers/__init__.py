"""Storage-backed operations for the editor API.

Each module provides async functions that implement the editor operations
not specific to a content format.  Managers accept a ``ConnectorStorage`` as
their first parameter and raise domain exceptions (``FileNotFoundError``,
``FileExistsError``, ``ApiError`` subclasses), never HTTP exceptions -- the
translation happens at the request boundary in ``errors.py``.
"""

"""HTTP API for py-smaps.

This package provides a Flask application that serves parsed smaps
reports as JSON.  It is an **optional** extra: install with::

    pip install py-smaps[web]

The ``create_app`` factory in ``app.py`` serves two endpoints:

- ``GET /api/smaps/<pid>``: parsed report and totals for a process.
- ``POST /api/parse``: parse report text sent by the client.
"""

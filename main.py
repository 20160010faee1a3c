"""
Entry point for Vercel.

Vercel's Python runtime imports this file and serves the ASGI object
called ``app``. The application is built from environment configuration
by ``webreader.main.create_app``; see ``webreader/config.py`` for the
variables it reads.
"""

from webreader.main import create_app

app = create_app()

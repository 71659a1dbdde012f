"""WSGI entrypoint (``gunicorn wsgi:app``)."""

from authcore import create_app

app = create_app()

"""Run the relay with ``python -m app``."""

from app.main import serve

serve()

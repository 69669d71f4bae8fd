"""Admin web interface (Falcon ASGI + Jinja2)."""

"""Adaptadores de infraestructura: Jinja2, disco, Playwright, HTTP."""

"""Servicios de aplicación: build y validadores."""

"""Dominio, configuración y servicios (sin detalles de infraestructura)."""

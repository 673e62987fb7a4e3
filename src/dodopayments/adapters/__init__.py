"""Adaptadores de infraestructura (httpx)."""

"""Núcleo genérico del cliente: modelos, marshaller, peticiones, respuestas y paginación."""

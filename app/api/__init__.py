"""
Pacchetto per le API JSON.

Contiene:
- api_logistics_bp   -> vista logistica (sessioni, record, export)
- api_definitions_bp -> tabelle di definizione (anagrafiche)
- api_admin_bp       -> utenti e permessi dei ruoli
"""

from .api_logistics import api_logistics_bp
from .api_definitions import api_definitions_bp
from .api_admin import api_admin_bp

__all__ = [
    "api_logistics_bp",
    "api_definitions_bp",
    "api_admin_bp",
]

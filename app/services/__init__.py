"""
Pacchetto per i servizi (logica di business) dell'applicazione.

I servizi orchestrano:
- repository e Unit of Work (accesso al DB)
- cache e modifiche ottimistiche della vista logistica
- validazioni e transazioni
- logging strutturato

Ogni operazione verso il database restituisce un ``Result`` (``Ok``/``Err``).
"""

from .results import Ok, Err, ErrorKind, Result, ValidationError, ServiceError
from .logistics_cache import DeliveryRecordCache, MAX_CACHE_ENTRIES
from .logistics_store import SqlDeliveryStore
from .logistics_coordinator import LogisticsCoordinator, CancellationToken
from .logistics_sessions import LogisticsSessionRegistry, get_session_registry
from .logistics_filters import apply_filters, sort_records
from .reference_service import ReferenceData, ReferenceOption, load_reference_data
from .dispatch_service import create_dispatch
from .definitions_service import (
    list_definitions,
    create_definition,
    update_definition,
    delete_definition,
)
from .admin_service import list_users, get_role_permissions, set_role_permissions

__all__ = [
    # Result
    "Ok",
    "Err",
    "ErrorKind",
    "Result",
    "ValidationError",
    "ServiceError",
    # Logistica
    "DeliveryRecordCache",
    "MAX_CACHE_ENTRIES",
    "SqlDeliveryStore",
    "LogisticsCoordinator",
    "CancellationToken",
    "LogisticsSessionRegistry",
    "get_session_registry",
    "apply_filters",
    "sort_records",
    "ReferenceData",
    "ReferenceOption",
    "load_reference_data",
    "create_dispatch",
    # Definizioni
    "list_definitions",
    "create_definition",
    "update_definition",
    "delete_definition",
    # Admin
    "list_users",
    "get_role_permissions",
    "set_role_permissions",
]

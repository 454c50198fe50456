"""
Pacchetto per i modelli SQLAlchemy.

Qui vengono esportate le classi modello principali.
"""

from .client import Client
from .warehouse import Warehouse
from .supplier import Supplier
from .carrier import Carrier
from .machine import Machine
from .holiday import Holiday
from .vat_exception import VatException
from .work_order import WorkOrder
from .item import Item
from .delivery_record import DeliveryRecord
from .role import Role, RolePermission
from .user import UserProfile

__all__ = [
    "Client",
    "Warehouse",
    "Supplier",
    "Carrier",
    "Machine",
    "Holiday",
    "VatException",
    "WorkOrder",
    "Item",
    "DeliveryRecord",
    "Role",
    "RolePermission",
    "UserProfile",
]

"""
Package repositories.
Espone i Repository per l'accesso ai dati.
"""

from .client_repo import ClientRepository
from .warehouse_repo import WarehouseRepository
from .supplier_repo import SupplierRepository
from .carrier_repo import CarrierRepository
from .machine_repo import MachineRepository
from .holiday_repo import HolidayRepository
from .vat_exception_repo import VatExceptionRepository
from .work_order_repo import WorkOrderRepository
from .item_repo import ItemRepository
from .delivery_record_repo import DeliveryRecordRepository
from .role_repo import RoleRepository
from .user_repo import UserProfileRepository

__all__ = [
    "ClientRepository",
    "WarehouseRepository",
    "SupplierRepository",
    "CarrierRepository",
    "MachineRepository",
    "HolidayRepository",
    "VatExceptionRepository",
    "WorkOrderRepository",
    "ItemRepository",
    "DeliveryRecordRepository",
    "RoleRepository",
    "UserProfileRepository",
]

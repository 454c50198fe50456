"""
Unit of Work Pattern.
Gestisce la transazione del database atomica e l'accesso ai repository.
"""
from typing import Optional

from app.extensions import db

# Import Repositories
from app.repositories.client_repo import ClientRepository
from app.repositories.warehouse_repo import WarehouseRepository
from app.repositories.supplier_repo import SupplierRepository
from app.repositories.carrier_repo import CarrierRepository
from app.repositories.machine_repo import MachineRepository
from app.repositories.holiday_repo import HolidayRepository
from app.repositories.vat_exception_repo import VatExceptionRepository
from app.repositories.work_order_repo import WorkOrderRepository
from app.repositories.item_repo import ItemRepository
from app.repositories.delivery_record_repo import DeliveryRecordRepository
from app.repositories.role_repo import RoleRepository
from app.repositories.user_repo import UserProfileRepository

class UnitOfWork:
    def __init__(self):
        self.session = db.session
        self._clients: Optional[ClientRepository] = None
        self._warehouses: Optional[WarehouseRepository] = None
        self._suppliers: Optional[SupplierRepository] = None
        self._carriers: Optional[CarrierRepository] = None
        self._machines: Optional[MachineRepository] = None
        self._holidays: Optional[HolidayRepository] = None
        self._vat_exceptions: Optional[VatExceptionRepository] = None
        self._work_orders: Optional[WorkOrderRepository] = None
        self._items: Optional[ItemRepository] = None
        self._delivery_records: Optional[DeliveryRecordRepository] = None
        self._roles: Optional[RoleRepository] = None
        self._users: Optional[UserProfileRepository] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.rollback()
            return False
        # Flask gestisce la chiusura della sessione, non chiudere qui

    @property
    def clients(self) -> ClientRepository:
        if self._clients is None:
            self._clients = ClientRepository(self.session)
        return self._clients

    @property
    def warehouses(self) -> WarehouseRepository:
        if self._warehouses is None:
            self._warehouses = WarehouseRepository(self.session)
        return self._warehouses

    @property
    def suppliers(self) -> SupplierRepository:
        if self._suppliers is None:
            self._suppliers = SupplierRepository(self.session)
        return self._suppliers

    @property
    def carriers(self) -> CarrierRepository:
        if self._carriers is None:
            self._carriers = CarrierRepository(self.session)
        return self._carriers

    @property
    def machines(self) -> MachineRepository:
        if self._machines is None:
            self._machines = MachineRepository(self.session)
        return self._machines

    @property
    def holidays(self) -> HolidayRepository:
        if self._holidays is None:
            self._holidays = HolidayRepository(self.session)
        return self._holidays

    @property
    def vat_exceptions(self) -> VatExceptionRepository:
        if self._vat_exceptions is None:
            self._vat_exceptions = VatExceptionRepository(self.session)
        return self._vat_exceptions

    @property
    def work_orders(self) -> WorkOrderRepository:
        if self._work_orders is None:
            self._work_orders = WorkOrderRepository(self.session)
        return self._work_orders

    @property
    def items(self) -> ItemRepository:
        if self._items is None:
            self._items = ItemRepository(self.session)
        return self._items

    @property
    def delivery_records(self) -> DeliveryRecordRepository:
        if self._delivery_records is None:
            self._delivery_records = DeliveryRecordRepository(self.session)
        return self._delivery_records

    @property
    def roles(self) -> RoleRepository:
        if self._roles is None:
            self._roles = RoleRepository(self.session)
        return self._roles

    @property
    def users(self) -> UserProfileRepository:
        if self._users is None:
            self._users = UserProfileRepository(self.session)
        return self._users

    def commit(self):
        try:
            self.session.commit()
        except Exception:
            self.rollback()
            raise

    def rollback(self):
        self.session.rollback()

"""Fixture condivise: app Flask su SQLite in memoria e dati di esempio."""

from datetime import date

import pytest

from app import create_app
from app.extensions import db
from app.models import (
    Carrier,
    Client,
    DeliveryRecord,
    Item,
    Role,
    RolePermission,
    UserProfile,
    Warehouse,
    WorkOrder,
)
from config import TestConfig


@pytest.fixture
def app():
    """App con schema creato da zero per ogni test."""
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


class Seeder:
    """Crea righe collegate (cliente -> FO -> item -> record) con valori di default."""

    def __init__(self):
        self._fo_counter = 1000

    def client(self, name="Acme Corp", **kwargs):
        entity = Client(name=name, **kwargs)
        db.session.add(entity)
        db.session.commit()
        return entity

    def warehouse(self, name="Armazém Central", **kwargs):
        entity = Warehouse(name=name, **kwargs)
        db.session.add(entity)
        db.session.commit()
        return entity

    def carrier(self, name="DHL"):
        entity = Carrier(name=name)
        db.session.add(entity)
        db.session.commit()
        return entity

    def record(
        self,
        dispatch_date,
        *,
        client=None,
        fo_number=None,
        campaign="Verão",
        item_description="Cartaz A3",
        item_quantity=50,
        quantity=None,
        is_gift=False,
        **record_fields,
    ):
        if fo_number is None:
            self._fo_counter += 1
            fo_number = str(self._fo_counter)
        work_order = WorkOrder(
            budget_number=int(fo_number) + 5000 if fo_number.isdigit() else None,
            work_order_number=fo_number,
            campaign_name=campaign,
            client_id=client.id if client else None,
            client_name=client.name if client else None,
        )
        item = Item(
            work_order=work_order,
            description=item_description,
            code=f"C-{fo_number}",
            quantity=item_quantity,
            is_gift=is_gift,
        )
        record = DeliveryRecord(
            item=item,
            description=item_description,
            quantity=quantity,
            dispatch_date=dispatch_date,
            delivery_date=dispatch_date,
            is_delivery=True,
            **record_fields,
        )
        db.session.add_all([work_order, item, record])
        db.session.commit()
        return record

    def role(self, name="ADMIN", permissions=None):
        role = Role(name=name)
        db.session.add(role)
        db.session.flush()
        for path, allowed in (permissions or {}).items():
            db.session.add(RolePermission(role_id=role.id, page_path=path, can_access=allowed))
        db.session.commit()
        return role

    def user(self, first_name="Ana", last_name="Silva", email="ana@example.com", role=None):
        user = UserProfile(
            first_name=first_name,
            last_name=last_name,
            email=email,
            role_id=role.id if role else None,
        )
        db.session.add(user)
        db.session.commit()
        return user


@pytest.fixture
def seed(app):
    return Seeder()


@pytest.fixture
def day():
    return date(2024, 6, 1)

import os
from datetime import timedelta

# Point the application at a throwaway database before it is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from inventory_tracker.database import Base, get_db
from inventory_tracker.main import app
from inventory_tracker.models import Category, Product, StockMovement, User
from inventory_tracker.repositories import InventoryStore
from inventory_tracker.utils.dates import utcnow
from inventory_tracker.utils.tokenJWT import create_access_token


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return InventoryStore(db)


@pytest.fixture
def user(db):
    user = User(name="Stock Manager", email="manager@stockroom.io", password_hash="not-used", role="manager")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def category(db):
    category = Category(name="Beverages", description="Drinks")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def make_product(db, category):
    def _make(**overrides):
        data = {
            "name": "Orange Juice",
            "category_id": category.id,
            "price": 10.0,
            "cost_price": 6.0,
            "quantity": 50,
            "low_stock_threshold": 10,
        }
        data.update(overrides)
        product = Product(**data)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product
    return _make


@pytest.fixture
def make_movement(db, user):
    def _make(product, type="sale", quantity=1, days_ago=0, now=None, unit_price=None):
        now = now or utcnow()
        price = product.price if unit_price is None else unit_price
        movement = StockMovement(
            product_id=product.id,
            type=type,
            quantity=quantity,
            previous_quantity=product.quantity,
            new_quantity=product.quantity,
            unit_price=price,
            total_value=price * quantity,
            performed_by=user.id,
            created_at=now - timedelta(days=days_ago),
        )
        db.add(movement)
        db.commit()
        return movement
    return _make


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(user):
    token = create_access_token({"sub": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}

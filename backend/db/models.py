"""
Ops Dashboard Database Models

Tables:
  1. users     - Dashboard accounts, role + assigned sales channels
  2. products  - Product catalog (read here; maintained by catalog tooling)
  3. alerts    - Per-product stock threshold rules

Schema is provisioned outside this service; ``Base.metadata`` mirrors it so
tests can build an equivalent SQLite database.
"""

import enum
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from db.session import Base


class UserRole(str, enum.Enum):
    """Closed set of dashboard roles."""

    ADMIN = "admin"
    ANALYST = "analyst"
    VIEWER = "viewer"


# ─── 1. Users ───────────────────────────────────────────────────────────────


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255))  # NULL for SSO-provisioned accounts
    full_name = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default=UserRole.VIEWER.value)
    assigned_channels = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'analyst', 'viewer')", name="ck_user_role"),
        Index("ix_users_created", "created_at"),
    )

    alerts = relationship("Alert", back_populates="creator")


# ─── 2. Products ────────────────────────────────────────────────────────────


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sku = Column(String(100), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    category = Column(String(100))
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (Index("ix_products_category", "category"),)

    alert = relationship("Alert", back_populates="product", uselist=False, passive_deletes=True)


# ─── 3. Alerts ──────────────────────────────────────────────────────────────


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    threshold = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"))
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        # One alert per product; duplicate inserts surface as IntegrityError.
        UniqueConstraint("product_id", name="uq_alert_product"),
    )

    product = relationship("Product", back_populates="alert")
    creator = relationship("User", back_populates="alerts")

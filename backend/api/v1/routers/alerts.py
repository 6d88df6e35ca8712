"""
Alerts Router — Per-product stock threshold rules.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, get_db, require_role
from db.models import Alert, Product, UserRole

router = APIRouter(prefix="/api/v1/alerts", tags=["alerts"])
logger = structlog.get_logger()

can_manage_alerts = require_role(UserRole.ADMIN.value, UserRole.ANALYST.value)


# ─── Schemas ────────────────────────────────────────────────────────────────


class AlertCreate(BaseModel):
    product_id: int = Field(..., alias="productId")
    threshold: int

    model_config = ConfigDict(populate_by_name=True)


class AlertUpdate(BaseModel):
    threshold: int | None = None
    is_active: bool | None = Field(None, alias="isActive")

    model_config = ConfigDict(populate_by_name=True)


class AlertResponse(BaseModel):
    id: int
    product_id: int = Field(..., alias="productId")
    product_name: str | None = Field(None, alias="productName")
    threshold: int
    is_active: bool = Field(..., alias="isActive")
    created_by: int | None = Field(None, alias="createdBy")

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    message: str


# ─── Endpoints ──────────────────────────────────────────────────────────────


@router.get("/", response_model=list[AlertResponse], dependencies=[Depends(get_current_user)])
async def list_alerts(db: AsyncSession = Depends(get_db)):
    """List all alerts with their product name, alphabetically by product."""
    result = await db.execute(
        select(Alert, Product.name)
        .join(Product, Alert.product_id == Product.id)
        .order_by(Product.name.asc(), Alert.id.asc())
    )
    return [_serialize_alert(alert, product_name) for alert, product_name in result.all()]


@router.post("/", response_model=AlertResponse, status_code=201)
async def create_alert(
    body: AlertCreate,
    db: AsyncSession = Depends(get_db),
    user: dict = Depends(can_manage_alerts),
):
    """Create the alert for a product. A product carries at most one alert."""
    product = await db.get(Product, body.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    alert = Alert(
        product_id=body.product_id,
        threshold=body.threshold,
        is_active=True,
        created_by=user["id"],
    )
    db.add(alert)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        if not _is_duplicate_product_error(exc):
            raise
        logger.info("alerts.create.conflict", product_id=body.product_id, user_id=user["id"])
        raise HTTPException(status_code=409, detail="Alert already exists for this product") from None

    await db.refresh(alert)
    logger.info("alerts.created", alert_id=alert.id, product_id=alert.product_id, user_id=user["id"])
    return _serialize_alert(alert, product.name)


@router.put("/{alert_id}", response_model=AlertResponse)
async def update_alert(
    alert_id: int,
    body: AlertUpdate,
    db: AsyncSession = Depends(get_db),
    user: dict = Depends(can_manage_alerts),
):
    """Update threshold and/or active flag; omitted fields keep their value."""
    alert = await db.get(Alert, alert_id)
    if not alert:
        raise HTTPException(status_code=404, detail="Alert not found")

    for field, value in body.model_dump(exclude_none=True).items():
        setattr(alert, field, value)

    await db.commit()
    await db.refresh(alert)
    product_name = (await db.execute(select(Product.name).where(Product.id == alert.product_id))).scalar_one_or_none()
    logger.info("alerts.updated", alert_id=alert.id, user_id=user["id"])
    return _serialize_alert(alert, product_name)


@router.delete("/{alert_id}", response_model=MessageResponse)
async def delete_alert(
    alert_id: int,
    db: AsyncSession = Depends(get_db),
    user: dict = Depends(can_manage_alerts),
):
    """Delete an alert."""
    alert = await db.get(Alert, alert_id)
    if not alert:
        raise HTTPException(status_code=404, detail="Alert not found")

    await db.delete(alert)
    await db.commit()
    logger.info("alerts.deleted", alert_id=alert_id, user_id=user["id"])
    return MessageResponse(message="Alert deleted")


def _serialize_alert(alert: Alert, product_name: str | None) -> AlertResponse:
    return AlertResponse(
        id=alert.id,
        product_id=alert.product_id,
        product_name=product_name,
        threshold=alert.threshold,
        is_active=alert.is_active,
        created_by=alert.created_by,
    )


def _is_duplicate_product_error(exc: IntegrityError) -> bool:
    # PostgreSQL names the constraint; SQLite names the column.
    message = str(exc.orig)
    return "uq_alert_product" in message or "alerts.product_id" in message

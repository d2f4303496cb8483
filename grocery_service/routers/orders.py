import logging
import random
import string
import time
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..analytics import MAX_ANALYTICS_DAYS, analytics_window, build_order_analytics
from ..database import get_db
from ..entitlements import require_module
from ..integrations.fraud_check import get_fraud_check_service, summarize_fraud_result
from ..integrations.steadfast import get_steadfast_courier
from ..models import Order, OrderItem, to_utc_naive, utcnow
from ..schemas import OrderCreate, OrderRef, OrderUpdate, SteadfastSend
from ..serializers import serialize_order, serialize_order_notification

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/orders", tags=["orders"])


def generate_order_id():
    """ORD-<epoch ms>-<9 random uppercase alphanumerics>."""
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=9))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"


def find_order(db: Session, ref) -> Optional[Order]:
    """Look an order up by business id, then by numeric row id."""
    order = db.query(Order).filter(Order.order_id == ref).first()
    if order is None and str(ref).isdigit():
        order = db.get(Order, int(ref))
    return order


def get_order_or_404(db: Session, ref) -> Order:
    order = find_order(db, ref)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order


@router.get("")
def list_orders(db: Session = Depends(get_db)):
    orders = db.query(Order).order_by(Order.created_at.desc(), Order.id.desc()).all()
    return [serialize_order(o) for o in orders]


# Called from the storefront checkout.
@router.post("", status_code=status.HTTP_201_CREATED)
def create_order(req: OrderCreate, db: Session = Depends(get_db)):
    order_id = req.order_id or generate_order_id()
    if db.query(Order).filter(Order.order_id == order_id).first():
        raise HTTPException(status_code=400, detail=f"Order {order_id} already exists")

    order = Order(
        order_id=order_id,
        session_id=req.session_id,
        customer_name=req.customer_name,
        phone=req.phone,
        address=req.address,
        subtotal=req.subtotal,
        tax=req.tax,
        shipping=req.shipping,
        total=req.total,
        status="pending",
        order_date=to_utc_naive(req.order_date) if req.order_date else utcnow(),
        items=[
            OrderItem(
                product_id=item.product_id,
                quantity=item.quantity,
                name=item.name,
                price=item.price,
                image=item.image,
            )
            for item in req.items
        ],
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info("Order %s created with %d item(s)", order.order_id, len(order.items))
    return serialize_order(order)


@router.get("/analytics")
def order_analytics(
    days: int = Query(30, ge=1, le=MAX_ANALYTICS_DAYS),
    top: int = Query(5, ge=0),
    db: Session = Depends(get_db),
):
    start_date, end_date = analytics_window(days)
    orders = (
        db.query(Order)
        .filter(Order.order_date >= start_date, Order.order_date <= end_date)
        .order_by(Order.order_date)
        .all()
    )
    return build_order_analytics(orders, start_date, end_date, top)


@router.get("/pending-count")
def pending_count(db: Session = Depends(get_db)):
    count = db.query(Order).filter(Order.status == "pending").count()
    return {"success": True, "count": count}


# Recent pending orders for the admin notification bell.
@router.get("/notifications")
def notifications(
    limit: int = Query(10, ge=1),
    since: Optional[datetime] = None,
    db: Session = Depends(get_db),
):
    query = db.query(Order).filter(Order.status == "pending")
    if since is not None:
        query = query.filter(Order.created_at > to_utc_naive(since))
    orders = query.order_by(Order.created_at.desc(), Order.id.desc()).limit(limit).all()
    items = [serialize_order_notification(o) for o in orders]
    return {"success": True, "notifications": items, "count": len(items)}


@router.post(
    "/steadfast/send",
    dependencies=[Depends(require_module("steadfast-courier"))],
)
def send_to_steadfast(req: SteadfastSend, db: Session = Depends(get_db)):
    order = get_order_or_404(db, req.order_id)
    if order.steadfast_consignment_id:
        raise HTTPException(
            status_code=400,
            detail={
                "message": "Order already sent to Steadfast Courier",
                "consignmentId": order.steadfast_consignment_id,
                "trackingCode": order.steadfast_tracking_code,
            },
        )

    item_description = ", ".join(f"{i.name} (Qty: {i.quantity})" for i in order.items)
    courier = get_steadfast_courier(db)
    response = courier.create_order({
        "invoice": order.order_id,
        "recipient_name": order.customer_name,
        "recipient_phone": order.phone,
        "recipient_address": order.address,
        "cod_amount": order.total,
        "note": f"Order from grocery store. Total items: {len(order.items)}",
        "item_description": item_description,
        "total_lot": len(order.items),
        "delivery_type": req.delivery_type,
    })

    consignment = response.get("consignment") or {}
    order.steadfast_consignment_id = consignment.get("consignment_id")
    order.steadfast_tracking_code = consignment.get("tracking_code")
    order.steadfast_status = consignment.get("status")
    order.steadfast_sent_at = utcnow()
    db.commit()
    logger.info("Order %s sent to Steadfast as %s", order.order_id, order.steadfast_consignment_id)

    return {
        "success": True,
        "message": "Order sent to Steadfast Courier successfully",
        "consignment": {
            "consignmentId": order.steadfast_consignment_id,
            "trackingCode": order.steadfast_tracking_code,
            "status": order.steadfast_status,
        },
    }


@router.post(
    "/steadfast/status",
    dependencies=[Depends(require_module("steadfast-courier"))],
)
def steadfast_status(req: OrderRef, db: Session = Depends(get_db)):
    order = get_order_or_404(db, req.order_id)
    sent = order.steadfast_sent_at or order.steadfast_consignment_id or order.steadfast_tracking_code
    if not sent:
        raise HTTPException(
            status_code=400, detail="Order has not been sent to Steadfast Courier yet"
        )

    # A sent order whose response carried no ids is looked up by invoice.
    courier = get_steadfast_courier(db)
    if order.steadfast_consignment_id:
        result = courier.get_status_by_consignment_id(order.steadfast_consignment_id)
    elif order.steadfast_tracking_code:
        result = courier.get_status_by_tracking_code(order.steadfast_tracking_code)
    else:
        result = courier.get_status_by_invoice(order.order_id)

    order.steadfast_status = result.get("delivery_status")
    db.commit()
    return {
        "success": True,
        "deliveryStatus": order.steadfast_status,
        "orderId": order.order_id,
        "trackingCode": order.steadfast_tracking_code,
        "consignmentId": order.steadfast_consignment_id,
    }


@router.get(
    "/steadfast/balance",
    dependencies=[Depends(require_module("steadfast-courier"))],
)
def steadfast_balance(db: Session = Depends(get_db)):
    result = get_steadfast_courier(db).get_balance()
    return {"success": True, "currentBalance": result.get("current_balance")}


@router.post(
    "/fraud-check",
    dependencies=[Depends(require_module("fraud-check"))],
)
def check_order_fraud(req: OrderRef, db: Session = Depends(get_db)):
    order = get_order_or_404(db, req.order_id)
    service = get_fraud_check_service(db)
    result = service.check_fraud(order.phone)

    checked_at = utcnow()
    if result["success"] and result.get("data"):
        summary = summarize_fraud_result(result["data"])
        summary["phone"] = order.phone
        summary["checkedAt"] = checked_at.isoformat()
        order.fraud_check_result = summary
    else:
        order.fraud_check_result = {"success": False, "checkedAt": checked_at.isoformat()}
    order.fraud_checked = True
    order.fraud_check_at = checked_at
    db.commit()

    return {
        "success": True,
        "fraudChecked": True,
        "result": order.fraud_check_result,
        "error": result.get("error"),
    }


@router.get("/{order_ref}")
def get_order(order_ref: str, db: Session = Depends(get_db)):
    return serialize_order(get_order_or_404(db, order_ref))


@router.patch("/{order_ref}")
def update_order(order_ref: str, req: OrderUpdate, db: Session = Depends(get_db)):
    order = get_order_or_404(db, order_ref)
    for field, value in req.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(order, field, value)
    db.commit()
    db.refresh(order)
    return serialize_order(order)

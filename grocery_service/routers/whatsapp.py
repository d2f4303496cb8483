from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..database import get_db
from ..entitlements import require_module
from ..integrations.whatsapp import get_whatsapp_service
from ..models import Order
from ..schemas import OrderRef, WhatsAppBroadcast, WhatsAppCartRecovery, WhatsAppSend

router = APIRouter(
    prefix="/api/admin/whatsapp",
    tags=["whatsapp"],
    dependencies=[Depends(require_module("whatsapp-marketing"))],
)


def _sent(result, failure_message):
    if not result["success"]:
        raise HTTPException(status_code=400, detail=result.get("error") or failure_message)
    return {"success": True, "messageId": result.get("messageId")}


@router.post("/send")
def send_message(req: WhatsAppSend, db: Session = Depends(get_db)):
    result = get_whatsapp_service(db).send_message(
        req.to,
        req.message,
        message_type=req.type,
        template_name=req.template_name,
        template_params=req.template_params,
    )
    return _sent(result, "Failed to send message")


@router.post("/broadcast")
def broadcast(req: WhatsAppBroadcast, db: Session = Depends(get_db)):
    result = get_whatsapp_service(db).send_broadcast(req.recipients, req.message)
    return {**result, "completed": True}


@router.post("/cart-recovery")
def cart_recovery(req: WhatsAppCartRecovery, db: Session = Depends(get_db)):
    cart_items = [item.model_dump() for item in req.cart_items]
    result = get_whatsapp_service(db).send_cart_recovery(req.phone, cart_items)
    return _sent(result, "Failed to send cart recovery message")


@router.post("/order-notification")
def order_notification(req: OrderRef, db: Session = Depends(get_db)):
    order = db.query(Order).filter(Order.order_id == req.order_id).first()
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    result = get_whatsapp_service(db).send_order_notification(
        order.phone, order.order_id, order.status or "pending", order.total
    )
    return _sent(result, "Failed to send order notification")

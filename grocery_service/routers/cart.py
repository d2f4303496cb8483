from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import CartItem
from ..schemas import CartAdd, CartQuantity
from ..serializers import serialize_cart_item

router = APIRouter(prefix="/api/cart", tags=["cart"])


def session_id(x_session_id: Optional[str] = Header(None)):
    return x_session_id or "default"


def _cart(db: Session, sid):
    items = (
        db.query(CartItem)
        .filter(CartItem.session_id == sid)
        .order_by(CartItem.created_at, CartItem.id)
        .all()
    )
    return [serialize_cart_item(item) for item in items]


def _find_line(db: Session, sid, product_id):
    return db.query(CartItem).filter(
        CartItem.session_id == sid, CartItem.product_id == product_id
    ).first()


@router.get("")
def get_cart(sid: str = Depends(session_id), db: Session = Depends(get_db)):
    return _cart(db, sid)


@router.post("")
def add_to_cart(req: CartAdd, sid: str = Depends(session_id), db: Session = Depends(get_db)):
    line = _find_line(db, sid, req.product_id)
    if line is not None:
        line.quantity += req.quantity
    else:
        db.add(CartItem(
            session_id=sid,
            product_id=req.product_id,
            quantity=req.quantity,
            name=req.name,
            price=req.price,
            image=req.image,
        ))
    db.commit()
    return _cart(db, sid)


@router.patch("")
def set_quantity(req: CartQuantity, sid: str = Depends(session_id), db: Session = Depends(get_db)):
    line = _find_line(db, sid, req.product_id)
    if line is None:
        raise HTTPException(status_code=404, detail="Item not found in cart")
    if req.quantity <= 0:
        db.delete(line)
    else:
        line.quantity = req.quantity
    db.commit()
    return _cart(db, sid)


@router.delete("")
def remove_from_cart(
    product_id: Optional[str] = Query(None, alias="productId"),
    sid: str = Depends(session_id),
    db: Session = Depends(get_db),
):
    query = db.query(CartItem).filter(CartItem.session_id == sid)
    if product_id:
        query = query.filter(CartItem.product_id == product_id)
    query.delete(synchronize_session=False)
    db.commit()
    return _cart(db, sid)

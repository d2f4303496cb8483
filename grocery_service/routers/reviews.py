from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import Review, utcnow
from ..schemas import ReviewCreate
from ..serializers import serialize_review

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.get("")
def list_reviews(product_id: str = Query(..., alias="productId"), db: Session = Depends(get_db)):
    reviews = (
        db.query(Review)
        .filter(Review.product_id == product_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )
    return [serialize_review(r) for r in reviews]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_review(req: ReviewCreate, db: Session = Depends(get_db)):
    review = Review(
        product_id=req.product_id,
        user_name=req.user_name,
        rating=req.rating,
        comment=req.comment,
        date=utcnow().date().isoformat(),
        verified=False,
    )
    db.add(review)
    db.commit()
    db.refresh(review)
    return serialize_review(review)

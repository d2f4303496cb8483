import logging
import re
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ..analytics import build_tracking_analytics
from ..database import get_db
from ..models import TrackingEvent, to_utc_naive, utcnow
from ..schemas import EventType, TrackingEventIn
from ..serializers import serialize_tracking_event

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tracking"])

_MOBILE = re.compile(r"mobile|android|iphone|ipod|blackberry|iemobile|opera mini")
_TABLET = re.compile(r"tablet|ipad|playbook|silk")


def parse_user_agent(user_agent):
    """Coarse (device_type, browser, os) guess from a User-Agent header."""
    if not user_agent:
        return "desktop", "Unknown", "Unknown"
    ua = user_agent.lower()

    device_type = "desktop"
    if _MOBILE.search(ua):
        device_type = "mobile"
    elif _TABLET.search(ua):
        device_type = "tablet"

    browser = "Unknown"
    if "edg" in ua:
        browser = "Edge"
    elif "opera" in ua or "opr" in ua:
        browser = "Opera"
    elif "chrome" in ua:
        browser = "Chrome"
    elif "firefox" in ua:
        browser = "Firefox"
    elif "safari" in ua:
        browser = "Safari"

    os_name = "Unknown"
    if "windows" in ua:
        os_name = "Windows"
    elif "android" in ua:
        os_name = "Android"
    elif "iphone" in ua or "ipad" in ua or "ios" in ua:
        os_name = "iOS"
    elif "mac os" in ua:
        os_name = "macOS"
    elif "linux" in ua:
        os_name = "Linux"

    return device_type, browser, os_name


def client_ip(request: Request):
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("x-real-ip") or "unknown"


def _time_filters(start_date, end_date):
    filters = []
    if start_date:
        filters.append(TrackingEvent.timestamp >= to_utc_naive(start_date))
    if end_date:
        filters.append(TrackingEvent.timestamp <= to_utc_naive(end_date))
    return filters


@router.post("/api/tracking")
def track_event(req: TrackingEventIn, request: Request, db: Session = Depends(get_db)):
    user_agent = request.headers.get("user-agent")
    device_type, browser, os_name = parse_user_agent(user_agent)
    event = TrackingEvent(
        event_type=req.event_type,
        event_name=req.event_name,
        session_id=req.session_id,
        user_id=req.user_id,
        user_agent=user_agent,
        ip_address=client_ip(request),
        page=req.page or request.url.path,
        referrer=req.referrer or request.headers.get("referer"),
        event_metadata=req.metadata,
        product_id=req.product_id,
        product_name=req.product_name,
        order_id=req.order_id,
        order_total=req.order_total,
        search_query=req.search_query,
        search_results=req.search_results,
        device_type=device_type,
        browser=browser,
        os=os_name,
        timestamp=utcnow(),
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return {"success": True, "id": str(event.id)}


@router.get("/api/tracking")
def list_events(
    event_type: Optional[EventType] = Query(None, alias="eventType"),
    page: Optional[str] = None,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    limit: int = Query(100, ge=1),
    skip: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    filters = _time_filters(start_date, end_date)
    if event_type:
        filters.append(TrackingEvent.event_type == event_type)
    if page:
        filters.append(TrackingEvent.page == page)

    query = db.query(TrackingEvent).filter(*filters)
    events = (
        query.order_by(TrackingEvent.timestamp.desc(), TrackingEvent.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return {
        "events": [serialize_tracking_event(e) for e in events],
        "total": query.count(),
        "limit": limit,
        "skip": skip,
    }


@router.get("/api/admin/tracking/analytics")
def tracking_analytics(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    event_type: Optional[EventType] = Query(None, alias="eventType"),
    db: Session = Depends(get_db),
):
    filters = _time_filters(start_date, end_date)
    if event_type:
        filters.append(TrackingEvent.event_type == event_type)
    events = db.query(TrackingEvent).filter(*filters).all()
    return build_tracking_analytics(events)

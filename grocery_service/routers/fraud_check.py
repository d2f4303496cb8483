from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..database import get_db
from ..entitlements import require_module
from ..integrations.fraud_check import get_fraud_check_service, summarize_fraud_result
from ..models import utcnow
from ..schemas import FraudCheckRequest

router = APIRouter(prefix="/api/admin/fraud-check", tags=["fraud-check"])


# Ad-hoc lookup by phone; nothing is stored.
@router.post("", dependencies=[Depends(require_module("fraud-check"))])
def check_phone(req: FraudCheckRequest, db: Session = Depends(get_db)):
    result = get_fraud_check_service(db).check_fraud(req.phone)
    if not result["success"]:
        raise HTTPException(status_code=400, detail=result.get("error") or "Failed to check fraud status")
    if not result.get("data"):
        raise HTTPException(status_code=500, detail="No data returned from fraud check service")

    summary = summarize_fraud_result(result["data"])
    summary["phone"] = req.phone
    summary["checkedAt"] = utcnow().isoformat()
    return {"success": True, "result": summary}

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from datetime import datetime

from pageguard.database import get_db
from pageguard.schemas import AssessmentRequest, SecurityVerdict, WhitelistRequest
from pageguard.services.assessment_service import AssessmentService
from pageguard.services.whitelist_store import WhitelistStore
from pageguard.core.exceptions import InvalidResourceIdentity, NoActiveResource

logger = logging.getLogger(__name__)

router = APIRouter()

NO_ACTIVE_RESOURCE = {
    "status": "no_active_resource",
    "message": "Open a website to analyze its security.",
}

# ============================================================================
# ASSESSMENT ENDPOINTS
# ============================================================================

@router.post("/assess", response_model=dict)
def assess_resource(request: AssessmentRequest, db: Session = Depends(get_db)):
    """Evaluate a resource, record the verdict and return the notification decision"""
    service = AssessmentService(db)
    try:
        result = service.assess(
            request.url,
            content=request.content,
            html=request.html,
            sensitivity=request.sensitivity,
        )
    except NoActiveResource:
        return NO_ACTIVE_RESOURCE
    except InvalidResourceIdentity as e:
        logger.warning(f"⚠️ Rejected resource: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    return {"status": "success", **result.model_dump(mode="json")}


@router.get("/status", response_model=dict)
def get_status(url: str = None, db: Session = Depends(get_db)):
    """Last known verdict for a URL (SAFE default when never assessed)"""
    service = AssessmentService(db)
    try:
        status = service.get_status(url)
    except NoActiveResource:
        return NO_ACTIVE_RESOURCE
    except InvalidResourceIdentity as e:
        raise HTTPException(status_code=422, detail=str(e))

    return {"status": "success", **status.model_dump(mode="json")}


@router.get("/history", response_model=List[SecurityVerdict])
def list_history(limit: int = 50, db: Session = Depends(get_db)):
    if limit < 1:
        raise HTTPException(status_code=422, detail="limit must be positive")
    return AssessmentService(db).recent_verdicts(limit=limit)

# ============================================================================
# WHITELIST ENDPOINTS
# ============================================================================

@router.get("/whitelist", response_model=List[str])
def list_whitelist(db: Session = Depends(get_db)):
    return sorted(WhitelistStore(db).hosts())


@router.post("/whitelist")
def add_to_whitelist(request: WhitelistRequest, db: Session = Depends(get_db)):
    store = WhitelistStore(db)
    try:
        added = store.add(request.host)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    response = {"status": "success", "host": request.host.strip().lower()}
    if not added:
        response["message"] = "Host already whitelisted"
    return response


@router.delete("/whitelist/{host}")
def remove_from_whitelist(host: str, db: Session = Depends(get_db)):
    store = WhitelistStore(db)
    try:
        removed = store.remove(host)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    response = {"status": "success", "host": host.strip().lower()}
    if not removed:
        response["message"] = "Host was not whitelisted"
    return response


@router.get("/health")
def health_check():
    return {"status": "healthy", "timestamp": datetime.utcnow(), "service": "PageGuard"}

"""
GitHub webhook endpoint
Receives push events and hands them to the lint pipeline
"""
import json
from typing import Optional
from fastapi import APIRouter, Header, Request, HTTPException
from pydantic import ValidationError
from delint.schemas.schemas import PushPayload
from delint.services.github_service import github_service
from delint.services.webhook_service import webhook_service


router = APIRouter()

@router.post("")
async def github_webhook(
    request: Request,
    x_github_event: Optional[str] = Header(None),
    x_hub_signature_256: Optional[str] = Header(None)
):
    """
    Handle GitHub webhook events
    """
    # Read raw body for signature verification
    body = await request.body()

    if not github_service.verify_webhook_signature(body, x_hub_signature_256):
        raise HTTPException(status_code=401, detail="Invalid webhook signature")

    # Only process push events
    if x_github_event != "push":
        return {"message": f"Ignored: {x_github_event} event"}

    try:
        payload = PushPayload.model_validate_json(body)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=json.loads(e.json()))

    return await webhook_service.process_push(payload)

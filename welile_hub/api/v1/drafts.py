"""/v1/drafts/* - auto-saved onboarding forms and their fee preview"""

from dataclasses import asdict
from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, HTTPException, Response

from welile_hub.api.dependencies import get_draft_store
from welile_hub.api.v1.schemas import QuoteResponse
from welile_hub.domain.drafts import DraftStore, draft_from_dict, draft_to_dict

router = APIRouter()


@router.put("/drafts/{key}")
def save_draft(
    key: str,
    payload: Dict[str, Any] = Body(...),
    store: DraftStore = Depends(get_draft_store),
):
    """Save a draft tagged with `kind` ("pipeline" or "full"); unknown fields are dropped"""
    draft = draft_from_dict(payload)
    store.save(key, draft)
    return draft_to_dict(draft)


@router.get("/drafts/{key}")
def load_draft(key: str, store: DraftStore = Depends(get_draft_store)):
    draft = store.load(key)
    if draft is None:
        raise HTTPException(status_code=404, detail=f"No draft saved for {key}")
    return draft_to_dict(draft)


@router.delete("/drafts/{key}", status_code=204)
def clear_draft(key: str, store: DraftStore = Depends(get_draft_store)):
    store.clear(key)
    return Response(status_code=204)


@router.post("/drafts/quote", response_model=QuoteResponse)
def quote_draft(payload: Dict[str, Any] = Body(...)):
    """
    Fee preview for a draft as the form is being filled in.

    Pipeline drafts are quoted over the default 30-day term with zero fees.
    """
    draft = draft_from_dict(payload)
    details = draft.repayment_details()
    return QuoteResponse(**asdict(details))

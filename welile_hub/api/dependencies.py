"""Dependency helpers for FastAPI endpoints"""

from fastapi import Request

from welile_hub.domain.drafts import DraftStore, InMemoryDraftStore

_draft_store = InMemoryDraftStore()


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_draft_store() -> DraftStore:
    """Process-local draft store; override the dependency to plug in durable storage"""
    return _draft_store

"""Tenant onboarding drafts and their persistence interface"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional, Protocol, Union

from welile_hub.domain.exceptions import InvalidDraftError
from welile_hub.domain.fees import calculate_repayment_details, calculate_tenant_fees
from welile_hub.domain.models import STATUS_PIPELINE, RepaymentDetails

KIND_PIPELINE = "pipeline"
KIND_FULL = "full"

DEFAULT_PIPELINE_TERM = 30


@dataclass
class PipelineTenantDraft:
    """Lead captured in the field with minimal data; carries no fees"""

    tenant_name: str = ""
    tenant_phone: str = ""
    agent_name: str = ""
    agent_phone: str = ""
    rent_amount: Optional[float] = None
    service_center: Optional[str] = None

    def repayment_details(self, repayment_days: int = DEFAULT_PIPELINE_TERM) -> RepaymentDetails:
        return calculate_tenant_fees(self.rent_amount, repayment_days, STATUS_PIPELINE)


@dataclass
class FullTenantDraft:
    """Complete onboarding form for a fee-bearing tenant"""

    tenant_name: str = ""
    tenant_phone: str = ""
    address: str = ""
    landlord_name: str = ""
    landlord_phone: str = ""
    rent_amount: Optional[float] = None
    repayment_days: int = 30
    agent_name: str = ""
    agent_phone: str = ""
    service_center: Optional[str] = None
    guarantor1_name: Optional[str] = None
    guarantor1_contact: Optional[str] = None
    guarantor2_name: Optional[str] = None
    guarantor2_contact: Optional[str] = None

    def repayment_details(self) -> RepaymentDetails:
        """Fee breakdown for the draft; raises on a missing or bad rent/term"""
        return calculate_repayment_details(self.rent_amount, self.repayment_days)


TenantDraft = Union[PipelineTenantDraft, FullTenantDraft]

_DRAFT_KINDS = {
    KIND_PIPELINE: PipelineTenantDraft,
    KIND_FULL: FullTenantDraft,
}


def draft_to_dict(draft: TenantDraft) -> Dict[str, Any]:
    """Serialize a draft with a `kind` tag so it can be restored to the right type"""
    kind = KIND_PIPELINE if isinstance(draft, PipelineTenantDraft) else KIND_FULL
    return {"kind": kind, **asdict(draft)}


def draft_from_dict(data: Dict[str, Any]) -> TenantDraft:
    """
    Restore a draft saved by draft_to_dict.

    Unknown keys are dropped so drafts saved by older forms still load.

    Raises:
        InvalidDraftError: payload is not a mapping or has an unknown kind
    """
    if not isinstance(data, dict):
        raise InvalidDraftError(f"Draft payload must be a mapping, got {type(data).__name__}")

    kind = data.get("kind")
    draft_cls = _DRAFT_KINDS.get(kind)
    if draft_cls is None:
        raise InvalidDraftError(f"Unknown draft kind: {kind!r}")

    known = {f.name for f in fields(draft_cls)}
    return draft_cls(**{k: v for k, v in data.items() if k in known})


class DraftStore(Protocol):
    """Where in-progress onboarding forms are auto-saved"""

    def load(self, key: str) -> Optional[TenantDraft]:
        ...

    def save(self, key: str, draft: TenantDraft) -> None:
        ...

    def clear(self, key: str) -> None:
        ...


class InMemoryDraftStore:
    """DraftStore kept in a dict; stores serialized copies, not live objects"""

    def __init__(self):
        self._drafts: Dict[str, Dict[str, Any]] = {}

    def load(self, key: str) -> Optional[TenantDraft]:
        data = self._drafts.get(key)
        return draft_from_dict(data) if data is not None else None

    def save(self, key: str, draft: TenantDraft) -> None:
        self._drafts[key] = draft_to_dict(draft)

    def clear(self, key: str) -> None:
        self._drafts.pop(key, None)

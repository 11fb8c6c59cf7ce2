"""Verification service: trust/risk assessment for a single listing.

Input is a stored deal id, or a standalone title and/or URL.
- Stored deal: full trust score (cues + domain + age) at `now`
- Standalone: cue score (cues + domain, no age)

No external calls are made; the assessment is rule-based.
"""

from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from dealsense.schemas import VerifyRequest, VerifyResponse
from dealsense.services.errors import DealNotFoundError, InvalidInputError
from dealsense.services.explain import generate_verify_notes, generate_warnings
from dealsense.services.trust import calculate_cue_score, calculate_trust_score, get_risk_level
from dealsense.stores import deals as deals_store

VERIFY_FIELDS = ["deal_id", "url", "title"]


async def verify_deal(
    session: AsyncSession,
    request: VerifyRequest,
    now: datetime | None = None,
) -> VerifyResponse:
    """Assess how trustworthy a listing looks.

    Raises:
        InvalidInputError: None of deal_id/url/title was provided.
        DealNotFoundError: deal_id does not exist.
    """
    if not (request.deal_id or request.url or request.title):
        raise InvalidInputError(
            "At least one of deal_id, url, or title is required",
            detail={"accepted_fields": VERIFY_FIELDS},
        )

    title = request.title or ""
    url = request.url or ""

    if request.deal_id:
        deal = await deals_store.get_deal(session, request.deal_id)
        if deal is None:
            raise DealNotFoundError(request.deal_id)
        title = deal.title
        url = deal.url
        trust_score = calculate_trust_score(deal, now or datetime.now(timezone.utc))
    else:
        trust_score = calculate_cue_score(title, url)

    return VerifyResponse(
        trust_score=trust_score,
        warnings=generate_warnings(title, url),
        risk_level=get_risk_level(trust_score),
        notes=generate_verify_notes(title, url, trust_score),
    )

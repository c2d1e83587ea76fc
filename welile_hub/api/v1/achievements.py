"""POST /v1/achievements/* - badge unlock checks and leaderboard ranking"""

from fastapi import APIRouter

from welile_hub.api.v1.schemas import (
    AchievementCheckRequest,
    AchievementCheckResponse,
    LeaderboardEntrySchema,
    LeaderboardRequest,
    LeaderboardResponse,
)
from welile_hub.config import settings
from welile_hub.domain.achievements import build_leaderboard, check_achievements

router = APIRouter()


@router.post("/achievements/check", response_model=AchievementCheckResponse)
def check_user_achievements(body: AchievementCheckRequest):
    """Badges the user unlocks with this action, excluding ones already earned"""
    new_badges = check_achievements(
        body.action,
        body.activity_counts(),
        metadata=body.metadata,
        already_earned=body.already_earned,
    )
    return AchievementCheckResponse(user_identifier=body.user_identifier, new_badges=new_badges)


@router.post("/achievements/leaderboard", response_model=LeaderboardResponse)
def get_leaderboard(body: LeaderboardRequest):
    """Users ranked by badge points, then badge count"""
    entries = build_leaderboard(
        (a.to_domain() for a in body.achievements),
        since=body.since,
        preview=settings.leaderboard_badge_preview,
    )
    return LeaderboardResponse(
        entries=[
            LeaderboardEntrySchema(
                user_identifier=e.user_identifier,
                total_points=e.total_points,
                badge_count=e.badge_count,
                rank=e.rank,
                recent_badges=e.recent_badges,
            )
            for e in entries
        ]
    )

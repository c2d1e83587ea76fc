"""Gamification - badge unlock checks and the points leaderboard"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Set

from welile_hub.domain.models import ActivityCounts, EarnedBadge, LeaderboardEntry, Milestone
from welile_hub.utils.date_utils import to_datetime

ACTION_TENANT_ADDED = "tenant_added"
ACTION_PAYMENT_RECORDED = "payment_recorded"
ACTION_REPORT_GENERATED = "report_generated"
ACTION_ONBOARDING_COMPLETE = "onboarding_complete"
ACTION_SECTION_VISITED = "section_visited"

TENANT_MILESTONES = [
    Milestone(1, "First Steps"),
    Milestone(10, "Team Builder"),
    Milestone(50, "Growth Expert"),
    Milestone(100, "Master Recruiter"),
]

PAYMENT_MILESTONES = [
    Milestone(1, "Payment Pro"),
    Milestone(100, "Collection Champion"),
]

REPORT_MILESTONES = [
    Milestone(1, "Report Master"),
    Milestone(10, "Data Analyst"),
]

WELCOME_BADGE = "Welcome Aboard"
EARLY_BIRD_BADGE = "Early Bird"
NIGHT_OWL_BADGE = "Night Owl"
EXPLORER_BADGE = "Explorer"

EARLY_BIRD_BEFORE_HOUR = 9
NIGHT_OWL_FROM_HOUR = 20
# Recordings needed before the time-of-day badges count
TIME_BADGE_MIN_RECORDINGS = 5
EXPLORER_MIN_SECTIONS = 8

RECENT_BADGE_PREVIEW = 3


def _reached(milestones: List[Milestone], count: int) -> List[str]:
    return [m.badge for m in milestones if count >= m.threshold]


def _time_badges(recorded_at: Any, recordings: int) -> List[str]:
    moment = to_datetime(recorded_at)
    if moment is None or recordings < TIME_BADGE_MIN_RECORDINGS:
        return []
    if moment.hour < EARLY_BIRD_BEFORE_HOUR:
        return [EARLY_BIRD_BADGE]
    if moment.hour >= NIGHT_OWL_FROM_HOUR:
        return [NIGHT_OWL_BADGE]
    return []


def check_achievements(
    action: str,
    counts: ActivityCounts,
    metadata: Optional[Dict[str, Any]] = None,
    already_earned: Iterable[str] = (),
) -> List[str]:
    """
    Badges newly unlocked by a user action.

    Milestone badges unlock once the matching counter reaches the
    threshold; time-of-day badges need a recording timestamp in metadata.
    Badges in already_earned are never re-awarded. Unknown actions unlock
    nothing.

    Returns:
        Badge names in milestone order
    """
    metadata = metadata or {}

    if action == ACTION_TENANT_ADDED:
        candidates = _reached(TENANT_MILESTONES, counts.tenants_added)
    elif action == ACTION_PAYMENT_RECORDED:
        candidates = _reached(PAYMENT_MILESTONES, counts.payments_recorded)
        candidates += _time_badges(metadata.get("recorded_at"), counts.recordings)
    elif action == ACTION_REPORT_GENERATED:
        candidates = _reached(REPORT_MILESTONES, counts.reports_generated)
    elif action == ACTION_ONBOARDING_COMPLETE:
        candidates = [WELCOME_BADGE]
    elif action == ACTION_SECTION_VISITED:
        sections = metadata.get("visited_sections", counts.visited_sections) or []
        candidates = [EXPLORER_BADGE] if len(set(sections)) >= EXPLORER_MIN_SECTIONS else []
    else:
        candidates = []

    earned: Set[str] = set(already_earned)
    return [badge for badge in candidates if badge not in earned]


def build_leaderboard(
    achievements: Iterable[EarnedBadge],
    since: Optional[datetime] = None,
    preview: int = RECENT_BADGE_PREVIEW,
) -> List[LeaderboardEntry]:
    """
    Rank users by badge points.

    Sorted by total points, then badge count, both descending; users who
    tie on both keep their first-seen order. Each entry lists up to
    `preview` badge names in the order they were supplied.

    Args:
        achievements: Earned badges, typically newest first
        since: Only count badges earned at or after this moment
        preview: How many badge names to keep per user
    """
    cutoff = to_datetime(since)
    totals: Dict[str, LeaderboardEntry] = {}

    for achievement in achievements:
        if cutoff is not None:
            earned_at = to_datetime(achievement.earned_at)
            if earned_at is None or earned_at < cutoff:
                continue

        entry = totals.get(achievement.user_identifier)
        if entry is None:
            entry = LeaderboardEntry(
                user_identifier=achievement.user_identifier,
                total_points=0,
                badge_count=0,
                rank=0,
            )
            totals[achievement.user_identifier] = entry

        entry.total_points += achievement.points or 0
        entry.badge_count += 1
        if len(entry.recent_badges) < preview:
            entry.recent_badges.append(achievement.badge_name)

    ranked = sorted(
        totals.values(),
        key=lambda e: (e.total_points, e.badge_count),
        reverse=True,
    )
    for position, entry in enumerate(ranked, start=1):
        entry.rank = position
    return ranked

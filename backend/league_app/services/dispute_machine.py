"""
Dispute State Machine

Lifecycle of a single dispute raised against a recorded match:

    open ──resolve──▶ resolved   (terminal)
      │
      └──withdraw──▶ withdrawn  (terminal)

Guards (checked in this order, first failure wins):
- create:   disputer is a participant → reason non-empty → proposed scores valid
            → no open dispute for the match
- resolve:  dispute open → resolution known → resolver is a participant
            → self-resolution policy → scores valid (modified only)
- withdraw: dispute open → caller raised the dispute

Side effects on the match go through the MatchStore only. The machine does not
serialize callers; DisputeCoordinator wraps it in a per-match critical section.
"""

import logging
from typing import Mapping, Optional

from league_app.errors import (
    DisputeNotFound,
    DisputeNotOpen,
    DuplicateOpenDispute,
    InvalidReason,
    InvalidResolution,
    InvalidScores,
    NotDisputeOwner,
    NotParticipant,
    SelfResolutionForbidden,
)
from league_app.models.dispute import (
    DISPUTE_OPEN,
    DISPUTE_RESOLVED,
    DISPUTE_WITHDRAWN,
    RESOLUTION_ACCEPTED,
    RESOLUTION_MODIFIED,
    RESOLUTION_REJECTED,
    Dispute,
)
from league_app.services.ports import DisputeStore, MatchSnapshot, MatchStore
from league_app.services.stores import scores_from_json, scores_to_json

logger = logging.getLogger(__name__)

RESOLUTIONS = (RESOLUTION_ACCEPTED, RESOLUTION_REJECTED, RESOLUTION_MODIFIED)


def normalize_scores(scores: Optional[Mapping], match: MatchSnapshot) -> Optional[dict]:
    """
    Coerce a {player_id: score} mapping (keys may arrive as strings) and check
    every key is a participant and every score a non-negative integer.
    """
    if scores is None:
        return None

    participant_ids = set(match.participant_ids)
    normalized = {}
    for raw_id, raw_score in scores.items():
        try:
            player_id = int(raw_id)
        except (TypeError, ValueError):
            raise InvalidScores(f"Invalid player id in scores: {raw_id!r}")
        if player_id not in participant_ids:
            raise InvalidScores(f"Player {player_id} is not a participant of match {match.id}")
        if isinstance(raw_score, bool) or not isinstance(raw_score, int) or raw_score < 0:
            raise InvalidScores(f"Score for player {player_id} must be a non-negative integer")
        normalized[player_id] = raw_score
    return normalized


class DisputeStateMachine:
    def __init__(self, matches: MatchStore, disputes: DisputeStore, allow_self_resolution: bool = True):
        self.matches = matches
        self.disputes = disputes
        self.allow_self_resolution = allow_self_resolution

    def _require_dispute(self, dispute_id: int) -> Dispute:
        dispute = self.disputes.get_dispute(dispute_id)
        if dispute is None:
            raise DisputeNotFound(f"Dispute {dispute_id} not found")
        return dispute

    @staticmethod
    def _require_open(dispute: Dispute) -> None:
        if dispute.status != DISPUTE_OPEN:
            raise DisputeNotOpen(f"Dispute {dispute.id} is {dispute.status}")

    def create(
        self,
        match_id: int,
        disputed_by: int,
        reason: str,
        proposed_scores: Optional[Mapping] = None,
    ) -> Dispute:
        match = self.matches.get_match(match_id)

        if disputed_by not in match.participant_ids:
            raise NotParticipant(f"Player {disputed_by} is not a participant of match {match_id}")

        if reason is None or not reason.strip():
            raise InvalidReason("Dispute reason must not be empty")

        scores = normalize_scores(proposed_scores, match)

        existing = self.disputes.get_open_dispute(match_id)
        if existing is not None:
            raise DuplicateOpenDispute(f"Match {match_id} is already disputed (dispute {existing.id})")

        dispute_id = self.disputes.insert_dispute(
            Dispute(
                match_id=match_id,
                disputed_by=disputed_by,
                reason=reason.strip(),
                proposed_scores=scores_to_json(scores),
                status=DISPUTE_OPEN,
            )
        )
        self.matches.set_dispute_flag(match_id, True, disputed_by)

        logger.info("Dispute %s opened on match %s by player %s", dispute_id, match_id, disputed_by)
        return self._require_dispute(dispute_id)

    def resolve(
        self,
        dispute_id: int,
        resolved_by: int,
        resolution: str,
        notes: Optional[str] = None,
        new_scores: Optional[Mapping] = None,
    ) -> Dispute:
        dispute = self._require_dispute(dispute_id)
        self._require_open(dispute)

        if resolution not in RESOLUTIONS:
            raise InvalidResolution(f"Unknown resolution '{resolution}'")

        match = self.matches.get_match(dispute.match_id)
        if resolved_by not in match.participant_ids:
            raise NotParticipant(f"Player {resolved_by} is not a participant of match {match.id}")
        if not self.allow_self_resolution and resolved_by == dispute.disputed_by:
            raise SelfResolutionForbidden(f"Player {resolved_by} raised dispute {dispute_id} and cannot resolve it")

        applied: Optional[dict] = None
        if resolution == RESOLUTION_ACCEPTED:
            applied = scores_from_json(dispute.proposed_scores)
        elif resolution == RESOLUTION_MODIFIED:
            if not new_scores:
                raise InvalidScores("A modified resolution requires new scores")
            applied = normalize_scores(new_scores, match)

        if applied:
            self.matches.update_participant_scores(match.id, applied)
        self.matches.set_dispute_flag(match.id, False)

        resolved = self.disputes.update_dispute(
            dispute_id,
            DISPUTE_RESOLVED,
            resolution=resolution,
            notes=notes,
            resolved_by=resolved_by,
            resolution_scores=applied if resolution == RESOLUTION_MODIFIED else None,
        )
        logger.info("Dispute %s resolved (%s) by player %s", dispute_id, resolution, resolved_by)
        return resolved

    def withdraw(self, dispute_id: int, user_id: int) -> Dispute:
        dispute = self._require_dispute(dispute_id)
        self._require_open(dispute)

        if user_id != dispute.disputed_by:
            raise NotDisputeOwner(f"Only player {dispute.disputed_by} can withdraw dispute {dispute_id}")

        self.matches.set_dispute_flag(dispute.match_id, False)
        withdrawn = self.disputes.update_dispute(dispute_id, DISPUTE_WITHDRAWN)

        logger.info("Dispute %s withdrawn by player %s", dispute_id, user_id)
        return withdrawn

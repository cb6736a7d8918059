"""
Dispute Coordinator

Serializes create / resolve / withdraw per match so the "no open dispute
exists" check and the insert or update that follows are observed as one unit.

Two layers:
1. In-process per-match lock (utils.locks.match_locks) plus SELECT ... FOR
   UPDATE on the match row, so concurrent callers queue and the loser sees
   the winner's committed dispute and gets DuplicateOpenDispute.
2. Partial unique index uq_dispute_open_match at the storage layer. Writers in
   other processes that slip past layer 1 hit an IntegrityError, reported as
   DuplicateOpenDispute. Only create can trip that index; an IntegrityError
   during resolve or withdraw propagates unchanged.

Each operation commits on success and rolls back on any failure. Nothing is
retried here.
"""

import logging
from typing import Callable, Mapping, Optional, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from league_app import settings
from league_app.errors import DisputeNotFound, DuplicateOpenDispute
from league_app.models.dispute import Dispute
from league_app.services.dispute_machine import DisputeStateMachine
from league_app.services.stores import SqlDisputeStore, SqlMatchStore
from league_app.utils.locks import LockRegistry, match_locks

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DisputeCoordinator:
    def __init__(
        self,
        locks: Optional[LockRegistry] = None,
        allow_self_resolution: Optional[bool] = None,
    ):
        self.locks = locks if locks is not None else match_locks
        self.allow_self_resolution = allow_self_resolution

    def _machine(self, session: Session) -> DisputeStateMachine:
        allow = self.allow_self_resolution
        if allow is None:
            allow = settings.ALLOW_SELF_RESOLUTION
        return DisputeStateMachine(SqlMatchStore(session), SqlDisputeStore(session), allow_self_resolution=allow)

    def _match_id_for(self, session: Session, dispute_id: int) -> int:
        match_id = session.exec(select(Dispute.match_id).where(Dispute.id == dispute_id)).first()
        if match_id is None:
            raise DisputeNotFound(f"Dispute {dispute_id} not found")
        return match_id

    def _run(
        self,
        session: Session,
        match_id: int,
        operation: Callable[[DisputeStateMachine], T],
        inserts_dispute: bool = False,
    ) -> T:
        with self.locks.hold(match_id):
            # Drop anything read before the lock was held
            session.expire_all()
            try:
                SqlMatchStore(session).lock_match(match_id)
                result = operation(self._machine(session))
                session.commit()
            except IntegrityError:
                session.rollback()
                if not inserts_dispute:
                    raise
                logger.warning("Open dispute race lost on match %s (unique index)", match_id)
                raise DuplicateOpenDispute(f"Match {match_id} is already disputed")
            except Exception:
                session.rollback()
                raise
            session.refresh(result)
            return result

    def create_dispute(
        self,
        session: Session,
        match_id: int,
        disputed_by: int,
        reason: str,
        proposed_scores: Optional[Mapping] = None,
    ) -> Dispute:
        return self._run(
            session,
            match_id,
            lambda machine: machine.create(match_id, disputed_by, reason, proposed_scores),
            inserts_dispute=True,
        )

    def resolve_dispute(
        self,
        session: Session,
        dispute_id: int,
        resolved_by: int,
        resolution: str,
        notes: Optional[str] = None,
        new_scores: Optional[Mapping] = None,
    ) -> Dispute:
        match_id = self._match_id_for(session, dispute_id)
        return self._run(
            session,
            match_id,
            lambda machine: machine.resolve(dispute_id, resolved_by, resolution, notes, new_scores),
        )

    def withdraw_dispute(self, session: Session, dispute_id: int, user_id: int) -> Dispute:
        match_id = self._match_id_for(session, dispute_id)
        return self._run(
            session,
            match_id,
            lambda machine: machine.withdraw(dispute_id, user_id),
        )

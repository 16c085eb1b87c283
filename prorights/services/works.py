"""Work registration and review."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from prorights.core.exceptions import DuplicateRecordError, InvalidTransitionError, ValidationError
from prorights.models.contributor import ContributorRole
from prorights.models.work import Work, WorkStatus
from prorights.services.access import Action, Actor, require
from prorights.services.contributors import ContributorRegistry, registry as default_registry

logger = logging.getLogger(__name__)


# Allowed review decisions, by current status
WORK_TRANSITIONS = {
    WorkStatus.PENDING: {WorkStatus.APPROVED, WorkStatus.REJECTED},
    WorkStatus.APPROVED: set(),
    WorkStatus.REJECTED: set(),
}


@dataclass
class ContributorEntry:
    """A contributor named at registration time."""
    user_id: UUID
    role: ContributorRole


class WorkService:
    """Service for registering, listing and reviewing works."""

    def __init__(self, contributors: ContributorRegistry | None = None):
        self.contributors = contributors or default_registry

    async def _ensure_identifiers_free(
        self,
        db: AsyncSession,
        iswc: Optional[str],
        isrc: Optional[str],
    ) -> None:
        conditions = []
        if iswc:
            conditions.append(Work.iswc == iswc)
        if isrc:
            conditions.append(Work.isrc == isrc)
        if not conditions:
            return

        result = await db.execute(select(Work).where(or_(*conditions)))
        existing = result.scalars().first()
        if existing is None:
            return
        if iswc and existing.iswc == iswc:
            raise DuplicateRecordError(f"A work with ISWC {iswc} is already registered")
        raise DuplicateRecordError(f"A work with ISRC {isrc} is already registered")

    async def register_work(
        self,
        db: AsyncSession,
        actor: Actor,
        title: str,
        contributors: Sequence[ContributorEntry] = (),
        iswc: Optional[str] = None,
        isrc: Optional[str] = None,
        duration: Optional[str] = None,
    ) -> Work:
        """
        Register a work together with its contributors.

        The work and every contributor row are written in the caller's unit
        of work; if any contributor is rejected nothing is kept once the
        session rolls back. Percentages are derived from roles.

        Raises:
            ValidationError: Empty title or unusable contributor
            DuplicateRecordError: ISWC or ISRC already registered
            DuplicateContributorError: Same user listed twice with one role
        """
        require(actor, Action.REGISTER_WORK)

        title = (title or "").strip()
        if not title:
            raise ValidationError("Work title is required")
        iswc = (iswc or "").strip() or None
        isrc = (isrc or "").strip() or None

        await self._ensure_identifiers_free(db, iswc, isrc)

        work = Work(
            title=title,
            iswc=iswc,
            isrc=isrc,
            duration=duration,
            status=WorkStatus.PENDING,
            registered_by=actor.id,
        )
        db.add(work)
        await db.flush()

        for entry in contributors:
            await self.contributors.attach(db, work, entry.user_id, entry.role)
        await self.contributors.recalculate_work(db, work.id)

        logger.info(f"Registered work '{title}' (id={work.id}) with {len(contributors)} contributors")
        return work

    async def get_work(self, db: AsyncSession, work_id: UUID) -> Work:
        return await self.contributors.get_work(db, work_id)

    async def list_works(self, db: AsyncSession, actor: Actor) -> List[Work]:
        """Admins see every work, artists the works they registered."""
        require(actor, Action.VIEW_WORKS)

        query = select(Work).order_by(Work.created_at.desc())
        if not actor.is_admin:
            query = query.where(Work.registered_by == actor.id)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def recent_works(self, db: AsyncSession, limit: int = 10) -> List[Work]:
        """Most recently registered works with their registrant loaded."""
        result = await db.execute(
            select(Work)
            .options(selectinload(Work.registrant))
            .order_by(Work.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def review_work(
        self,
        db: AsyncSession,
        actor: Actor,
        work_id: UUID,
        status: WorkStatus,
    ) -> Work:
        """
        Approve or reject a pending work.

        Raises:
            PermissionDeniedError: Actor is not an admin
            InvalidTransitionError: Work is not pending or target is pending
        """
        require(actor, Action.REVIEW_WORK)
        work = await self.get_work(db, work_id)

        if status not in WORK_TRANSITIONS[work.status]:
            raise InvalidTransitionError(
                f"Cannot move work {work_id} from {work.status.value} to {status.value}"
            )

        work.status = status
        await db.flush()
        await db.refresh(work)

        logger.info(f"Work {work_id} {status.value} by {actor.id}")
        return work


# Default service instance
work_service = WorkService()

"""
Contributor registry.

Maintains the mapping from a work to its contributors. Every change to a
work's contributor set (add, remove, role change) recalculates the
percentages of the whole work with the allocation rule.
"""
from __future__ import annotations

import logging
from typing import List
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from prorights.core.exceptions import (
    DuplicateContributorError,
    NotFoundError,
    ValidationError,
)
from prorights.models.contributor import Contributor, ContributorRole
from prorights.models.royalty_distribution import RoyaltyDistribution
from prorights.models.user import User, UserRole
from prorights.models.work import Work
from prorights.services.access import Action, Actor, require, require_owner_or_admin
from prorights.services.allocation import allocate

logger = logging.getLogger(__name__)


class ContributorRegistry:
    """
    Service for managing the contributors of a work.

    Stateless; all database operations go through the session parameter.
    Methods flush but never commit.
    """

    async def get_work(self, db: AsyncSession, work_id: UUID) -> Work:
        result = await db.execute(select(Work).where(Work.id == work_id))
        work = result.scalar_one_or_none()
        if work is None:
            raise NotFoundError("Work", work_id)
        return work

    async def get_contributor(self, db: AsyncSession, contributor_id: UUID) -> Contributor:
        result = await db.execute(select(Contributor).where(Contributor.id == contributor_id))
        contributor = result.scalar_one_or_none()
        if contributor is None:
            raise NotFoundError("Contributor", contributor_id)
        return contributor

    async def _check_contributor_user(self, db: AsyncSession, user_id: UUID) -> User:
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User", user_id)
        if user.role is not UserRole.ARTIST:
            raise ValidationError(f"User {user_id} is not an artist account and cannot contribute to works")
        return user

    async def _ensure_unique(
        self,
        db: AsyncSession,
        work_id: UUID,
        user_id: UUID,
        role: ContributorRole,
    ) -> None:
        result = await db.execute(
            select(Contributor.id).where(
                Contributor.work_id == work_id,
                Contributor.user_id == user_id,
                Contributor.role == role,
            )
        )
        if result.first() is not None:
            raise DuplicateContributorError(
                f"User {user_id} is already a {role.value} on work {work_id}"
            )

    async def _next_sequence(self, db: AsyncSession, work_id: UUID) -> int:
        result = await db.execute(
            select(func.coalesce(func.max(Contributor.sequence), -1)).where(
                Contributor.work_id == work_id
            )
        )
        return int(result.scalar()) + 1

    async def attach(
        self,
        db: AsyncSession,
        work: Work,
        user_id: UUID,
        role: ContributorRole,
    ) -> Contributor:
        """
        Create a contributor row without permission checks or recalculation.

        Used by work registration, which recalculates once after attaching
        every contributor.
        """
        await self._check_contributor_user(db, user_id)
        await self._ensure_unique(db, work.id, user_id, role)

        contributor = Contributor(
            work_id=work.id,
            user_id=user_id,
            role=role,
            sequence=await self._next_sequence(db, work.id),
        )
        db.add(contributor)
        await db.flush()
        return contributor

    async def recalculate_work(self, db: AsyncSession, work_id: UUID) -> List[Contributor]:
        """
        Recompute the percentage of every contributor of a work.

        Idempotent: running it twice on an unchanged set gives the same values.

        Returns:
            Contributors in insertion order with updated percentages
        """
        result = await db.execute(
            select(Contributor)
            .where(Contributor.work_id == work_id)
            .order_by(Contributor.sequence)
        )
        contributors = list(result.scalars().all())

        percentages = allocate([c.role for c in contributors])
        for contributor, percentage in zip(contributors, percentages):
            contributor.percentage = percentage

        await db.flush()

        logger.debug(
            f"Recalculated {len(contributors)} contributor percentages for work {work_id}: "
            f"total={sum(percentages)}"
        )
        return contributors

    async def add_contributor(
        self,
        db: AsyncSession,
        actor: Actor,
        work_id: UUID,
        user_id: UUID,
        role: ContributorRole,
    ) -> Contributor:
        """
        Add a contributor to a work and recalculate the work's split.

        Raises:
            NotFoundError: Work or user not found
            ValidationError: User is not an artist account
            DuplicateContributorError: (work, user, role) already exists
            PermissionDeniedError: Actor neither owns the work nor is admin
        """
        require(actor, Action.MANAGE_CONTRIBUTORS)
        work = await self.get_work(db, work_id)
        require_owner_or_admin(actor, work.registered_by, "work")

        contributor = await self.attach(db, work, user_id, role)
        await self.recalculate_work(db, work.id)

        logger.info(f"Added {role.value} {user_id} to work {work_id}")
        return contributor

    async def remove_contributor(
        self,
        db: AsyncSession,
        actor: Actor,
        contributor_id: UUID,
    ) -> None:
        """
        Remove a contributor and recalculate the remaining split.

        Raises:
            NotFoundError: Contributor not found
            ValidationError: Contributor already has royalty distributions
        """
        require(actor, Action.MANAGE_CONTRIBUTORS)
        contributor = await self.get_contributor(db, contributor_id)
        work = await self.get_work(db, contributor.work_id)
        require_owner_or_admin(actor, work.registered_by, "work")

        result = await db.execute(
            select(func.count(RoyaltyDistribution.id)).where(
                RoyaltyDistribution.contributor_id == contributor_id
            )
        )
        if result.scalar() > 0:
            raise ValidationError(
                f"Contributor {contributor_id} has royalty distributions and cannot be removed"
            )

        await db.delete(contributor)
        await db.flush()
        await self.recalculate_work(db, work.id)

        logger.info(f"Removed contributor {contributor_id} from work {work.id}")

    async def change_role(
        self,
        db: AsyncSession,
        actor: Actor,
        contributor_id: UUID,
        role: ContributorRole,
    ) -> Contributor:
        """
        Move a contributor to another role bucket.

        Treated as leaving the old bucket and joining the new one, so the
        whole work is recalculated.
        """
        require(actor, Action.MANAGE_CONTRIBUTORS)
        contributor = await self.get_contributor(db, contributor_id)
        work = await self.get_work(db, contributor.work_id)
        require_owner_or_admin(actor, work.registered_by, "work")

        if contributor.role == role:
            return contributor

        await self._ensure_unique(db, work.id, contributor.user_id, role)

        old_role = contributor.role
        contributor.role = role
        await db.flush()
        await self.recalculate_work(db, work.id)

        logger.info(f"Contributor {contributor_id} moved from {old_role.value} to {role.value}")
        return contributor

    async def list_contributors(self, db: AsyncSession, work_id: UUID) -> List[Contributor]:
        """
        Contributors of a work with their user loaded, in insertion order.
        """
        await self.get_work(db, work_id)

        result = await db.execute(
            select(Contributor)
            .options(selectinload(Contributor.user))
            .where(Contributor.work_id == work_id)
            .order_by(Contributor.sequence)
        )
        return list(result.scalars().all())


# Default registry instance
registry = ContributorRegistry()

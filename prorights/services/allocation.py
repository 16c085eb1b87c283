"""
Contributor percentage allocation.

Business rules:
1. Each contributor role owns a fixed quota bucket:
   - composer: 40.00
   - author:   40.00
   - vocalist: 20.00

2. Within a populated bucket of size N, every member gets quota / N,
   rounded half-up to 2 decimals.

3. Empty buckets are omitted. Their quota is not handed to other roles, so a
   work without a vocalist allocates 80.00 in total.

4. Rounding residue is not corrected: three composers get 13.33 each
   (39.99 in total), three vocalists 6.67 each (20.01 in total).
"""
from __future__ import annotations

from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Sequence

from prorights.models.contributor import ContributorRole

ROLE_QUOTAS: Dict[ContributorRole, Decimal] = {
    ContributorRole.COMPOSER: Decimal("40.00"),
    ContributorRole.AUTHOR: Decimal("40.00"),
    ContributorRole.VOCALIST: Decimal("20.00"),
}

CENT = Decimal("0.01")


def quota(role: ContributorRole) -> Decimal:
    """Total percentage pool for a role."""
    return ROLE_QUOTAS[role]


def per_capita_share(role: ContributorRole, count: int) -> Decimal:
    """
    Share of each member of a bucket with ``count`` members.

    Args:
        role: Contributor role (bucket)
        count: Number of contributors in the bucket

    Returns:
        quota / count rounded half-up to 2 decimals, 0.00 for an empty bucket
    """
    if count < 0:
        raise ValueError(f"Bucket size cannot be negative, got {count}")
    if count == 0:
        return Decimal("0.00")
    return (quota(role) / Decimal(count)).quantize(CENT, rounding=ROUND_HALF_UP)


def allocate(roles: Sequence[ContributorRole]) -> List[Decimal]:
    """
    Percentage of every contributor, given the role of each.

    Args:
        roles: Role of each contributor of a work, in any order

    Returns:
        Percentages aligned with ``roles``
    """
    bucket_sizes = Counter(roles)
    return [per_capita_share(role, bucket_sizes[role]) for role in roles]


def allocation_total(roles: Sequence[ContributorRole]) -> Decimal:
    """Sum of all allocated percentages. Informational, may be below 100."""
    return sum(allocate(roles), Decimal("0.00"))

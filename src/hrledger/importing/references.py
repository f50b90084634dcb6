"""Reference validator. Every linked user account must exist before any write."""

from __future__ import annotations

import asyncio
import logging

from hrledger.core.exceptions import MissingReferences
from hrledger.core.protocols import IUserRegistry
from hrledger.importing.normalizer import EmployeeDraft

logger = logging.getLogger(__name__)


def referenced_user_ids(drafts: list[EmployeeDraft]) -> list[str]:
    """Distinct non-empty ``userAccount`` ids, in first-seen order."""
    seen: dict[str, None] = {}
    for draft in drafts:
        if draft.user_account:
            seen.setdefault(draft.user_account, None)
    return list(seen)


class ReferenceValidator:
    """Batch-level check: the whole file fails if any referenced account is missing."""

    def __init__(self, users: IUserRegistry) -> None:
        self._users = users

    async def validate(self, drafts: list[EmployeeDraft]) -> None:
        requested = referenced_user_ids(drafts)
        if not requested:
            return

        found = await asyncio.to_thread(self._users.find_by_ids, requested)
        if len(found) >= len(requested):
            return

        found_ids = {user.id for user in found}
        missing = [user_id for user_id in requested if user_id not in found_ids]
        logger.warning("Import rejected: %d referenced user accounts missing", len(missing))
        raise MissingReferences(missing)

# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Access ledger – who has unlocked which private resource.

One instance per resource kind, bound to that kind's grant model
(``UserListAccess``, ``UserPresetAccess``, ``UserNoteAccess``).  Every method
works inside the caller's session and never commits; the resource service
decides when the transaction ends.

Revocation is all-or-nothing per resource: there is no way to
revoke a single user.
"""

from typing import Iterable, List, Optional, Set

from sqlalchemy.orm import Session


class AccessLedger:
    def __init__(self, grant_model):
        self.model = grant_model

    def grant(self, db: Session, user_id: str, resource_id: str) -> bool:
        """
        Record that *user_id* unlocked *resource_id*.  Idempotent: returns
        ``False`` (and adds nothing) when the grant already exists.
        """
        if self.has_grant(db, user_id, resource_id):
            return False
        db.add(self.model(user_id=user_id, resource_id=resource_id))
        # sessions run with autoflush=False; make the row visible to
        # later queries in the same transaction
        db.flush()
        return True

    def has_grant(self, db: Session, user_id: Optional[str], resource_id: str) -> bool:
        if not user_id:
            return False
        return (
            db.query(self.model.user_id)
            .filter(self.model.user_id == user_id, self.model.resource_id == resource_id)
            .first()
            is not None
        )

    def revoke_all(self, db: Session, resource_id: str) -> int:
        """Delete every grant for *resource_id*.  Returns the number removed."""
        removed = (
            db.query(self.model)
            .filter(self.model.resource_id == resource_id)
            .delete()
        )
        db.flush()
        return removed

    def granted_among(
        self, db: Session, user_id: Optional[str], resource_ids: Iterable[str]
    ) -> Set[str]:
        """Subset of *resource_ids* that *user_id* holds a grant for."""
        ids = list(resource_ids)
        if not user_id or not ids:
            return set()
        rows = (
            db.query(self.model.resource_id)
            .filter(self.model.user_id == user_id, self.model.resource_id.in_(ids))
            .all()
        )
        return {r[0] for r in rows}

    def holders(self, db: Session, resource_id: str) -> List[str]:
        """User ids holding a grant on *resource_id*, oldest grant first."""
        rows = (
            db.query(self.model.user_id)
            .filter(self.model.resource_id == resource_id)
            .order_by(self.model.granted_at.asc())
            .all()
        )
        return [r[0] for r in rows]

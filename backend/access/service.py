# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Generic privacy-guarded resource service.

Lists, presets and notes behave identically as far as access control goes,
so a single :class:`ResourceService` implements the operations once and is
instantiated per :class:`ResourceKind` (see ``resources.kinds``).

Transaction rules
-----------------
* Every mutating call is one transaction.  The target row is loaded with
  ``SELECT ... FOR UPDATE`` so a password rotation and a concurrent unlock on
  the same resource are serialized by the database.
* Expected failures (:class:`core.errors.AccessError`) roll the transaction
  back and come back as ``Result(success=False)``.  Anything else rolls back
  and propagates.
* The stored privacy level is always re-read from the row; nothing the client
  claims about having unlocked a resource is trusted.
"""

import functools
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from core.errors import (
    AccessError,
    InvalidCredential,
    NotFound,
    PermissionDenied,
    Result,
    ValidationError,
)
from core.logger import logger
from core import security
from access.gate import compute_access, visible_clause
from access.ledger import AccessLedger
from access.machine import Transition, guard_change, plan_creation, plan_transition
from access.privacy import PUBLIC, PRIVATE, Personal, Private, read_privacy, write_privacy
from models.user import User

# Unknown resource and wrong password must be indistinguishable to the caller
_UNLOCK_FAIL = "Incorrect password."
_NO_PERMISSION = "You do not have permission to perform this action."


@dataclass(frozen=True)
class ResourceKind:
    label: str                      # "list", "preset", "note" – used in messages
    model: type                     # ORM model of the resource table
    grant_model: type               # ORM model of its access ledger
    unique_names: bool = True
    # Kind-specific columns settable on create/update, mapped to a factory
    # for their empty value (used when the column is NULL or the caller is
    # locked out).
    extra_fields: Dict[str, Callable[[], Any]] = field(default_factory=dict)
    # (model, column) of rows owned by a resource, removed together with it
    children: Tuple[Tuple[type, str], ...] = ()


def atomic(fn):
    """Run a service method as a single transaction returning a Result."""

    @functools.wraps(fn)
    def wrapper(self, db: Session, *args, **kwargs):
        try:
            result = fn(self, db, *args, **kwargs)
        except AccessError as exc:
            db.rollback()
            logger.info("%s.%s refused: %s", self.kind.label, fn.__name__, exc.code)
            return Result.fail(exc)
        except Exception:
            db.rollback()
            raise
        db.commit()
        return result

    return wrapper


class ResourceService:
    def __init__(self, kind: ResourceKind):
        self.kind = kind
        self.model = kind.model
        self.ledger = AccessLedger(kind.grant_model)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list(self, db: Session, user_id: Optional[str] = None, hide_locked: bool = False) -> List[dict]:
        """
        Public and private resources plus the caller's own personal ones,
        ordered by ``order_position``.  With *hide_locked* the entries the
        caller cannot open are dropped.
        """
        model = self.model
        rows = (
            db.query(model)
            .filter(visible_clause(model, user_id))
            .order_by(model.order_position.asc(), model.created_at.asc())
            .all()
        )
        granted = self.ledger.granted_among(
            db, user_id, [r.id for r in rows if r.privacy == PRIVATE]
        )

        views = []
        for row in rows:
            has_access = compute_access(read_privacy(row), user_id, row.id in granted)
            if hide_locked and not has_access:
                continue
            views.append(self._view(row, has_access))
        return views

    def accessible_ids(self, db: Session, user_id: Optional[str] = None) -> Set[str]:
        """Ids of every resource of this kind that *user_id* can open."""
        return {view["id"] for view in self.list(db, user_id, hide_locked=True)}

    def require_access(self, db: Session, resource_id: str, user_id: Optional[str], *, lock: bool = False):
        """
        Load a resource the caller can open and return ``(row, state)``.
        Raises NotFound or PermissionDenied ("locked") otherwise.
        """
        row = self._load(db, resource_id, lock=lock)
        state = read_privacy(row)
        if not compute_access(state, user_id, self.ledger.has_grant(db, user_id, row.id)):
            raise PermissionDenied(f"This {self.kind.label} is locked.")
        return row, state

    @atomic
    def members(self, db: Session, resource_id: str, user_id: Optional[str] = None) -> Result:
        """
        Users who can open the resource.  Signed-in callers only, and the
        caller must be one of them.
        """
        if not user_id:
            raise PermissionDenied("You must be signed in to see who has access.")
        row, state = self.require_access(db, resource_id, user_id)

        query = db.query(User)
        if isinstance(state, Personal):
            query = query.filter(User.id == state.owner_id)
        elif isinstance(state, Private):
            query = query.filter(User.id.in_(self.ledger.holders(db, row.id)))
        users = query.order_by(User.username.asc()).all()
        return Result.ok(items=[{"id": u.id, "username": u.username} for u in users])

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @atomic
    def create(
        self,
        db: Session,
        *,
        name: str,
        color: Optional[str] = None,
        privacy: str = PUBLIC,
        password: Optional[str] = None,
        user_id: Optional[str] = None,
        **fields,
    ) -> Result:
        """
        Create a resource.  A private resource is granted to its creator
        straight away so they are never locked out of it.
        """
        self._check_fields(fields)
        name = self._clean_name(db, name)
        transition = plan_creation(privacy, user_id=user_id, password=password, label=self.kind.label)

        top = db.query(func.max(self.model.order_position)).scalar()
        row = self.model(
            name=name,
            color=color,
            order_position=(top if top is not None else -1) + 1,
            **{k: v for k, v in fields.items() if v is not None},
        )
        write_privacy(row, transition.state)
        db.add(row)
        db.flush()

        granted = False
        if transition.regrant:
            granted = self.ledger.grant(db, transition.regrant, row.id)

        logger.info("%s %s created (%s)", self.kind.label, row.id, transition.state.level)
        has_access = compute_access(transition.state, user_id, granted)
        return Result.ok(resource=self._view(row, has_access))

    @atomic
    def update(
        self,
        db: Session,
        resource_id: str,
        *,
        user_id: Optional[str] = None,
        name: Optional[str] = None,
        color: Optional[str] = None,
        privacy: Optional[str] = None,
        current_password: Optional[str] = None,
        new_password: Optional[str] = None,
        **fields,
    ) -> Result:
        """
        Change metadata and/or privacy.  ``None`` leaves a field unchanged;
        ``privacy=None`` keeps the current level.
        """
        self._check_fields(fields)
        row = self._load(db, resource_id, password_supplied=bool(current_password))
        state = read_privacy(row)
        guard_change(state, user_id=user_id, password=current_password, label=self.kind.label)
        transition = plan_transition(
            state, privacy, user_id=user_id, new_password=new_password, label=self.kind.label
        )

        if name is not None:
            row.name = self._clean_name(db, name, exclude_id=row.id)
        if color is not None:
            row.color = color
        for key, value in fields.items():
            if value is not None:
                setattr(row, key, value)
        self._apply(db, row, transition)

        has_access = compute_access(
            transition.state, user_id, self.ledger.has_grant(db, user_id, row.id)
        )
        return Result.ok(resource=self._view(row, has_access))

    @atomic
    def delete(
        self,
        db: Session,
        resource_id: str,
        password: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Result:
        """Delete after the same guards as an edit (owner / current password)."""
        row = self._load(db, resource_id, password_supplied=bool(password))
        guard_change(
            read_privacy(row),
            user_id=user_id,
            password=password,
            label=self.kind.label,
            action="delete",
        )
        # FK cascades remove grants and child rows too, but not every backend
        # enforces them
        self.ledger.revoke_all(db, row.id)
        for child, column in self.kind.children:
            db.query(child).filter(getattr(child, column) == row.id).delete(synchronize_session=False)
        db.delete(row)
        logger.info("%s %s deleted", self.kind.label, resource_id)
        return Result.ok()

    @atomic
    def verify_password(
        self,
        db: Session,
        resource_id: str,
        password: Optional[str],
        user_id: Optional[str] = None,
    ) -> Result:
        """
        Unlock a private resource.  Non-private resources succeed without a
        password.  On success the caller (if signed in) is granted access
        until the next rotation or revoke-all.
        """
        row = db.query(self.model).filter(self.model.id == resource_id).with_for_update().first()
        if row is None:
            logger.info("%s unlock failed: unknown id %s", self.kind.label, resource_id)
            raise InvalidCredential(_UNLOCK_FAIL)

        state = read_privacy(row)
        if not isinstance(state, Private):
            return Result.ok()
        if not security.verify_password(password, state.password_hash):
            logger.info("%s %s unlock failed: wrong password", self.kind.label, row.id)
            raise InvalidCredential(_UNLOCK_FAIL)

        if user_id and self.ledger.grant(db, user_id, row.id):
            logger.info("%s %s unlocked by user %s", self.kind.label, row.id, user_id)
        return Result.ok()

    @atomic
    def revoke_all(self, db: Session, resource_id: str, user_id: Optional[str] = None) -> Result:
        """
        Cut off everyone else without changing the password: every grant is
        removed and only the acting user is granted again.
        """
        if not user_id:
            raise PermissionDenied("You must be signed in to revoke access.")
        row = self._load(db, resource_id)
        state = read_privacy(row)
        if isinstance(state, Personal) and state.owner_id != user_id:
            raise PermissionDenied(_NO_PERMISSION)
        if isinstance(state, Private) and not self.ledger.has_grant(db, user_id, row.id):
            raise PermissionDenied(_NO_PERMISSION)

        removed = self.ledger.revoke_all(db, row.id)
        if isinstance(state, Private):
            self.ledger.grant(db, user_id, row.id)
        logger.info(
            "%s %s: %d grant(s) revoked by user %s", self.kind.label, row.id, removed, user_id
        )
        return Result.ok()

    @atomic
    def reorder(
        self,
        db: Session,
        positions: Iterable[Tuple[str, int]],
        user_id: Optional[str] = None,
    ) -> Result:
        """
        Persist a new display order.  The caller must be signed in and able
        to open every entry it moves (owner of a personal one, grant holder
        of a private one); ``order_position`` alone never needs a password.
        All-or-nothing: one unknown or unopenable id rejects the whole batch.
        """
        if not user_id:
            raise PermissionDenied("You must be signed in to reorder.")
        positions = list(positions)
        ids = [rid for rid, _ in positions]
        rows = {
            r.id: r
            for r in db.query(self.model).filter(self.model.id.in_(ids)).with_for_update().all()
        }
        for rid, order_position in positions:
            row = rows.get(rid)
            if row is None:
                raise NotFound(f"{self.kind.label.capitalize()} not found.")
            if not compute_access(read_privacy(row), user_id, self.ledger.has_grant(db, user_id, row.id)):
                raise PermissionDenied(f"You do not have permission to reorder this {self.kind.label}.")
            row.order_position = order_position
        return Result.ok()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load(self, db: Session, resource_id: str, *, lock: bool = True, password_supplied: bool = False):
        query = db.query(self.model).filter(self.model.id == resource_id)
        if lock:
            query = query.with_for_update()
        row = query.first()
        if row is None:
            if password_supplied:
                raise InvalidCredential(_UNLOCK_FAIL)
            raise NotFound(f"{self.kind.label.capitalize()} not found.")
        return row

    def _apply(self, db: Session, row, transition: Transition) -> None:
        if transition.reset_ledger:
            removed = self.ledger.revoke_all(db, row.id)
            if transition.rotates_password:
                logger.info("%s %s password set, %d grant(s) revoked", self.kind.label, row.id, removed)
        write_privacy(row, transition.state)
        if transition.regrant:
            self.ledger.grant(db, transition.regrant, row.id)

    def _clean_name(self, db: Session, name: Optional[str], exclude_id: Optional[str] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError(f"The {self.kind.label} name cannot be empty.")
        if self.kind.unique_names:
            query = db.query(self.model.id).filter(self.model.name == name)
            if exclude_id is not None:
                query = query.filter(self.model.id != exclude_id)
            if query.first() is not None:
                raise ValidationError(f"A {self.kind.label} named '{name}' already exists.")
        return name

    def _check_fields(self, fields: dict) -> None:
        unknown = set(fields) - set(self.kind.extra_fields)
        if unknown:
            raise TypeError(f"unexpected {self.kind.label} field(s): {', '.join(sorted(unknown))}")

    def _view(self, row, has_access: bool) -> dict:
        view = {
            "id": row.id,
            "name": row.name,
            "color": row.color,
            "privacy": row.privacy or PUBLIC,
            "has_access": has_access,
            "order_position": row.order_position or 0,
            "created_at": row.created_at,
        }
        # Body fields of a locked resource are never handed out
        for key, empty in self.kind.extra_fields.items():
            value = getattr(row, key) if has_access else None
            view[key] = value if value is not None else empty()
        return view

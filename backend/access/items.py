# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Items stored inside a guarded resource: the tasks of a list and the tasks of
a preset.

Items have no privacy of their own.  Every read and every write first opens
the parent through :meth:`ResourceService.require_access`, so a locked
list's tasks are neither listed nor editable, and unlocking the list (or
being its owner) reveals them.  Writes lock the parent row, which orders them
against a concurrent password rotation or revoke-all on that parent.

A kind may allow *unfiled* items (``parent_id is None``); those belong to no
resource and are open to everyone.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from core.errors import NotFound, Result, ValidationError
from core.logger import logger
from access.gate import compute_access
from access.privacy import read_privacy
from access.service import ResourceService, atomic
from models.user import User


@dataclass(frozen=True)
class ItemKind:
    label: str                      # "task", "preset task"
    model: type
    parent: ResourceService
    parent_field: str               # column on ``model`` pointing at the parent
    allow_unfiled: bool = False
    movable: bool = False           # may change parent after creation
    # Kind-specific columns besides name/done, mapped to their empty value
    fields: Dict[str, Callable[[], Any]] = field(default_factory=dict)


class ItemService:
    def __init__(self, kind: ItemKind):
        self.kind = kind
        self.model = kind.model
        self.parent = kind.parent
        self._parent_col = getattr(kind.model, kind.parent_field)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_all(self, db: Session, user_id: Optional[str] = None) -> List[dict]:
        """Items of every parent the caller can open, plus unfiled ones."""
        clauses = []
        open_ids = self.parent.accessible_ids(db, user_id)
        if open_ids:
            clauses.append(self._parent_col.in_(open_ids))
        if self.kind.allow_unfiled:
            clauses.append(self._parent_col.is_(None))
        if not clauses:
            return []
        rows = self._ordered(db.query(self.model).filter(or_(*clauses))).all()
        return [self._view(r) for r in rows]

    @atomic
    def list(self, db: Session, parent_id: Optional[str], user_id: Optional[str] = None) -> Result:
        """Items of one parent; a locked parent is PermissionDenied."""
        self._open_parent(db, parent_id, user_id, lock=False)
        rows = self._ordered(db.query(self.model).filter(self._in_parent(parent_id))).all()
        return Result.ok(items=[self._view(r) for r in rows])

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @atomic
    def add(
        self,
        db: Session,
        parent_id: Optional[str],
        *,
        name: str,
        user_id: Optional[str] = None,
        **fields,
    ) -> Result:
        self._check_fields(fields)
        name = self._clean_name(name)
        parent = self._open_parent(db, parent_id, user_id)
        if fields.get("assignee_id"):
            self._check_assignee(db, parent, fields["assignee_id"])

        row = self.model(
            name=name,
            order_position=self._next_position(db, parent_id),
            **{k: v for k, v in fields.items() if v is not None},
        )
        setattr(row, self.kind.parent_field, parent_id)
        db.add(row)
        db.flush()
        return Result.ok(resource=self._view(row))

    @atomic
    def update(self, db: Session, item_id: str, *, user_id: Optional[str] = None, **changes) -> Result:
        """
        Apply *changes* (``name``, ``done`` and the kind's fields).  A key set
        to ``None`` clears that column; ``name`` cannot be cleared.
        """
        self._check_fields({k: v for k, v in changes.items() if k not in ("name", "done")})
        row = self._load(db, item_id)
        parent = self._open_parent(db, getattr(row, self.kind.parent_field), user_id)

        if "name" in changes:
            row.name = self._clean_name(changes.pop("name"))
        if "done" in changes:
            row.done = bool(changes.pop("done"))
        if changes.get("assignee_id"):
            self._check_assignee(db, parent, changes["assignee_id"])
        for key, value in changes.items():
            setattr(row, key, value)
        return Result.ok(resource=self._view(row))

    @atomic
    def delete(self, db: Session, item_id: str, user_id: Optional[str] = None) -> Result:
        row = self._load(db, item_id)
        self._open_parent(db, getattr(row, self.kind.parent_field), user_id)
        db.delete(row)
        return Result.ok()

    @atomic
    def move(
        self, db: Session, item_id: str, new_parent_id: Optional[str], user_id: Optional[str] = None
    ) -> Result:
        """
        Move an item to another parent (appended at the end).  The caller
        must be able to open both.  An assignee who cannot open the new
        parent is unassigned.
        """
        if not self.kind.movable:
            raise ValidationError(f"A {self.kind.label} cannot be moved.")
        row = self._load(db, item_id)
        self._open_parent(db, getattr(row, self.kind.parent_field), user_id)
        target = self._open_parent(db, new_parent_id, user_id)

        row.order_position = self._next_position(db, new_parent_id)
        setattr(row, self.kind.parent_field, new_parent_id)
        assignee = getattr(row, "assignee_id", None)
        if assignee and target is not None and not self._can_open(db, target, assignee):
            logger.info("%s %s moved, assignee %s dropped", self.kind.label, row.id, assignee)
            row.assignee_id = None
        return Result.ok(resource=self._view(row))

    @atomic
    def reorder(
        self,
        db: Session,
        positions: Iterable[Tuple[str, int]],
        user_id: Optional[str] = None,
    ) -> Result:
        """All-or-nothing: one unknown item or one locked parent rejects the batch."""
        positions = list(positions)
        rows = {
            r.id: r
            for r in db.query(self.model).filter(self.model.id.in_([i for i, _ in positions])).all()
        }
        opened = set()
        for item_id, order_position in positions:
            row = rows.get(item_id)
            if row is None:
                raise NotFound(f"{self._label()} not found.")
            parent_id = getattr(row, self.kind.parent_field)
            if parent_id not in opened:
                self._open_parent(db, parent_id, user_id)
                opened.add(parent_id)
            row.order_position = order_position
        return Result.ok()

    @atomic
    def delete_done(self, db: Session, parent_id: Optional[str], user_id: Optional[str] = None) -> Result:
        """Remove the completed items of one parent."""
        self._open_parent(db, parent_id, user_id)
        removed = (
            db.query(self.model)
            .filter(self._in_parent(parent_id), self.model.done.is_(True))
            .delete(synchronize_session=False)
        )
        return Result.ok(f"{removed} completed {self.kind.label}(s) removed.")

    @atomic
    def reset_done(self, db: Session, parent_id: Optional[str], user_id: Optional[str] = None) -> Result:
        """Mark every item of one parent as not done (start a preset over)."""
        self._open_parent(db, parent_id, user_id)
        db.query(self.model).filter(self._in_parent(parent_id)).update(
            {self.model.done: False}, synchronize_session=False
        )
        return Result.ok()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _label(self) -> str:
        return self.kind.label[0].upper() + self.kind.label[1:]

    def _open_parent(self, db: Session, parent_id: Optional[str], user_id: Optional[str], lock: bool = True):
        if parent_id is None:
            if not self.kind.allow_unfiled:
                raise ValidationError(f"A {self.kind.label} needs a {self.parent.kind.label}.")
            return None
        row, _ = self.parent.require_access(db, parent_id, user_id, lock=lock)
        return row

    def _can_open(self, db: Session, parent, user_id: str) -> bool:
        granted = self.parent.ledger.has_grant(db, user_id, parent.id)
        return compute_access(read_privacy(parent), user_id, granted)

    def _check_assignee(self, db: Session, parent, assignee_id: str) -> None:
        if db.get(User, assignee_id) is None:
            raise ValidationError("Assignee not found.")
        if parent is not None and not self._can_open(db, parent, assignee_id):
            raise ValidationError(
                f"Cannot assign this {self.kind.label} to a user who cannot open the "
                f"{self.parent.kind.label}."
            )

    def _load(self, db: Session, item_id: str):
        row = db.query(self.model).filter(self.model.id == item_id).first()
        if row is None:
            raise NotFound(f"{self._label()} not found.")
        return row

    def _in_parent(self, parent_id: Optional[str]):
        return self._parent_col.is_(None) if parent_id is None else self._parent_col == parent_id

    def _next_position(self, db: Session, parent_id: Optional[str]) -> int:
        top = db.query(func.max(self.model.order_position)).filter(self._in_parent(parent_id)).scalar()
        return (top if top is not None else -1) + 1

    def _ordered(self, query):
        return query.order_by(self.model.order_position.asc(), self.model.created_at.asc())

    def _clean_name(self, name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError(f"The {self.kind.label} name cannot be empty.")
        return name

    def _check_fields(self, fields: dict) -> None:
        unknown = set(fields) - set(self.kind.fields)
        if unknown:
            raise TypeError(f"unexpected {self.kind.label} field(s): {', '.join(sorted(unknown))}")

    def _view(self, row) -> dict:
        view = {
            "id": row.id,
            "name": row.name,
            "done": bool(row.done),
            self.kind.parent_field: getattr(row, self.kind.parent_field),
            "order_position": row.order_position or 0,
            "created_at": row.created_at,
        }
        for key, empty in self.kind.fields.items():
            value = getattr(row, key)
            view[key] = value if value is not None else empty()
        return view

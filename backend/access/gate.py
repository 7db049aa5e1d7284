# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Authorization gate – read access per (resource, user) and the visibility
filter applied to every listing.

Access rules
------------
* Public   – everyone, including anonymous callers.
* Private  – only users holding a ledger grant.  There is no owner of a
             private resource; its creator is granted at creation time.
* Personal – only the owner.  Personal resources of other users are never
             listed, not even as locked entries.
"""

from typing import Optional

from sqlalchemy import and_, or_

from access.privacy import PERSONAL, PRIVATE, PUBLIC, Personal, PrivacyState, Private, Public


def compute_access(state: PrivacyState, user_id: Optional[str], granted: bool) -> bool:
    """
    *granted* is whether the ledger holds a grant for (user_id, resource);
    it only matters for private resources.
    """
    if isinstance(state, Public):
        return True
    if isinstance(state, Private):
        return bool(user_id) and granted
    if isinstance(state, Personal):
        return bool(user_id) and state.owner_id == user_id
    return False


def visible_clause(model, user_id: Optional[str]):
    """SQL filter selecting the rows *user_id* may see in a listing."""
    shared = or_(model.privacy.is_(None), model.privacy.in_((PUBLIC, PRIVATE)))
    if not user_id:
        return shared
    return or_(shared, and_(model.privacy == PERSONAL, model.owner_id == user_id))

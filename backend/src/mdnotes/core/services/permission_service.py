"""Permission evaluation for notes.

All checks are pure functions of (actor, note, guest policy): no database
access, no side effects, never raising. A missing grant yields ``False``;
callers turn that into ``AuthorizationDeniedError``.

Grants form a disjunction, so adding access list entries can only add
permissions:

- the owner may read and write;
- a user entry grants read, and write when ``can_edit`` is set;
- a group entry does the same for members of that group;
- the special ``loggedIn`` group covers every authenticated actor;
- the special ``everyone`` group covers every actor, guests capped by the
  configured ``GuestAccess`` level.
"""

from typing import Optional

from ...config import GuestAccess
from ..models.group import SpecialGroup
from ..models.note import Note
from ..models.user import User


class PermissionService:
    """Decides who may create, read, write and own notes."""

    def __init__(self, guest_access: GuestAccess = GuestAccess.WRITE):
        self.guest_access = guest_access

    def may_create(self, user: Optional[User]) -> bool:
        if user is not None:
            return True
        return self.guest_access.allows(GuestAccess.CREATE)

    def is_owner(self, user: Optional[User], note: Note) -> bool:
        if user is None or note.owner_id is None:
            return False
        return note.owner_id == user.id

    def may_read(self, user: Optional[User], note: Note) -> bool:
        if self.is_owner(user, note):
            return True
        if self._user_entry_grants(user, note, need_edit=False):
            return True
        return self._group_entry_grants(user, note, need_edit=False)

    def may_write(self, user: Optional[User], note: Note) -> bool:
        if self.is_owner(user, note):
            return True
        if self._user_entry_grants(user, note, need_edit=True):
            return True
        return self._group_entry_grants(user, note, need_edit=True)

    def _user_entry_grants(self, user: Optional[User], note: Note, need_edit: bool) -> bool:
        if user is None:
            return False
        for entry in note.user_permissions or []:
            if entry.user_id == user.id and (entry.can_edit or not need_edit):
                return True
        return False

    def _group_entry_grants(self, user: Optional[User], note: Note, need_edit: bool) -> bool:
        member_of = {group.id for group in (user.groups or [])} if user is not None else set()
        for entry in note.group_permissions or []:
            if need_edit and not entry.can_edit:
                continue
            group = entry.group
            if group is None:
                continue
            if group.is_special(SpecialGroup.EVERYONE):
                if user is not None:
                    return True
                needed = GuestAccess.WRITE if need_edit else GuestAccess.READ
                if self.guest_access.allows(needed):
                    return True
            elif group.is_special(SpecialGroup.LOGGED_IN):
                if user is not None:
                    return True
            elif group.id in member_of:
                return True
        return False

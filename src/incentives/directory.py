"""Display-name resolution for incentive calculations."""
from __future__ import annotations

from typing import Iterable, Mapping

FALLBACK_ID_LENGTH = 8


class UserDirectory:
    """Maps user ids to display names.

    The viewer always resolves to their own name even when the directory
    has not been loaded (regular users never load the full directory).
    """

    def __init__(
        self,
        names: Mapping[str, str] | None = None,
        viewer_id: str | None = None,
        viewer_name: str | None = None,
    ) -> None:
        self._names = {str(k): v for k, v in (names or {}).items()}
        self.viewer_id = str(viewer_id) if viewer_id is not None else None
        self.viewer_name = viewer_name

    @classmethod
    def from_users(cls, users: Iterable, viewer=None) -> "UserDirectory":
        names = {str(u.id): _display_name(u) for u in users}
        if viewer is None:
            return cls(names)
        return cls(names, viewer_id=str(viewer.id), viewer_name=_display_name(viewer))

    @classmethod
    def empty(cls) -> "UserDirectory":
        return cls()

    @property
    def names(self) -> dict[str, str]:
        return dict(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, user_id) -> bool:
        return str(user_id) in self._names

    def resolve(self, user_id) -> str:
        user_id = str(user_id)
        if self.viewer_id is not None and user_id == self.viewer_id and self.viewer_name:
            return self.viewer_name
        name = self._names.get(user_id)
        if name:
            return name
        return fallback_name(user_id)


def fallback_name(user_id) -> str:
    return f"User {str(user_id)[:FALLBACK_ID_LENGTH]}"


def _display_name(user) -> str:
    display = getattr(user, "display_name", None)
    if display:
        return display
    return getattr(user, "name", "") or ""

"""Key/value settings mixin for Store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from cairn.db.models import Setting

if TYPE_CHECKING:
    from cairn.store.store import Store


class SettingsOpsMixin:
    async def get_setting(self: Store, key: str) -> str | None:
        async with self._db.session() as session:
            row = await session.get(Setting, key)
            return row.value if row else None

    async def set_setting(self: Store, key: str, value: str | None) -> None:
        async with self._db.session() as session:
            row = await session.get(Setting, key)
            if row is None:
                session.add(Setting(key=key, value=value))
            else:
                row.value = value

    async def get_settings(self: Store) -> dict[str, str]:
        """Return all settings that have a value."""
        async with self._db.session() as session:
            result = await session.execute(select(Setting))
            return {row.key: row.value for row in result.scalars() if row.value}

"""
CategoryRegistry -- closed category tags plus registered extensions.

A material's category is either one of the well-known tags
(``RawMaterialCategory`` / ``PreprocessedCategory``) or a tag registered
here for its item kind.  Anything else is rejected with
UnknownCategoryError before it reaches a material row.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from kitstock_kernel.domain.dtos import CategoryInfo
from kitstock_kernel.domain.validation import normalize_category, parse_enum
from kitstock_kernel.domain.values import WELL_KNOWN_CATEGORIES, ItemKind
from kitstock_kernel.exceptions import (
    DuplicateCategoryError,
    InvalidArgumentError,
    UnknownCategoryError,
)
from kitstock_kernel.logging_config import get_logger
from kitstock_kernel.models.category import CustomCategory
from kitstock_kernel.services.base import BaseService

logger = get_logger("services.category_registry")


def _material_kind(item_kind: ItemKind | str) -> ItemKind:
    kind = parse_enum(ItemKind, item_kind, "item_kind")
    if kind not in WELL_KNOWN_CATEGORIES:
        raise InvalidArgumentError("item_kind", f"'{kind.value}' items have no category")
    return kind


class CategoryRegistry(BaseService[CustomCategory]):
    """Registers and validates material category tags per item kind."""

    def _custom_names(self, kind: ItemKind) -> list[str]:
        return list(
            self.session.execute(
                select(CustomCategory.name)
                .where(CustomCategory.item_kind == kind.value)
                .order_by(CustomCategory.name)
            ).scalars()
        )

    def register(self, item_kind: ItemKind | str, name: str, actor_id: UUID) -> CategoryInfo:
        """
        Register a new tag for ``item_kind``.

        Raises:
            DuplicateCategoryError: tag is well-known or already registered.
            InvalidArgumentError: empty name or an item kind without categories.
        """
        kind = _material_kind(item_kind)
        tag = normalize_category(name)

        if tag in WELL_KNOWN_CATEGORIES[kind] or tag in self._custom_names(kind):
            raise DuplicateCategoryError(kind.value, tag)

        category = CustomCategory(item_kind=kind.value, name=tag, created_by_id=actor_id)
        savepoint = self.session.begin_nested()
        try:
            self.session.add(category)
            self.session.flush()
            savepoint.commit()
        except IntegrityError:
            savepoint.rollback()
            raise DuplicateCategoryError(kind.value, tag) from None

        logger.info(
            "category_registered",
            extra={"item_kind": kind.value, "category": tag},
        )
        return category.to_dto()

    def list_custom(self, item_kind: ItemKind | str) -> list[CategoryInfo]:
        kind = _material_kind(item_kind)
        rows = self.session.execute(
            select(CustomCategory)
            .where(CustomCategory.item_kind == kind.value)
            .order_by(CustomCategory.name)
        ).scalars()
        return [row.to_dto() for row in rows]

    def available(self, item_kind: ItemKind | str) -> list[str]:
        """Well-known tags first, then registered ones by name."""
        kind = _material_kind(item_kind)
        return list(WELL_KNOWN_CATEGORIES[kind]) + self._custom_names(kind)

    def validate(self, item_kind: ItemKind | str, tag: str) -> str:
        """Return the normalised tag, or raise UnknownCategoryError."""
        kind = _material_kind(item_kind)
        normalized = normalize_category(tag)
        if normalized in WELL_KNOWN_CATEGORIES[kind]:
            return normalized

        registered = self.session.execute(
            select(CustomCategory.id).where(
                CustomCategory.item_kind == kind.value,
                CustomCategory.name == normalized,
            )
        ).scalar_one_or_none()
        if registered is None:
            raise UnknownCategoryError(kind.value, normalized)
        return normalized

"""
Module: kitstock_kernel.models.category
Responsibility: Registered extension tags for material categories.

The closed set of well-known tags lives in
``kitstock_kernel.domain.values``; operators extend it per item kind by
registering rows here.  A material's category must be one or the other.
"""

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from kitstock_kernel.db.base import TrackedBase
from kitstock_kernel.domain.dtos import CategoryInfo
from kitstock_kernel.domain.values import ItemKind


class CustomCategory(TrackedBase):
    __tablename__ = "custom_categories"

    __table_args__ = (
        UniqueConstraint("item_kind", "name", name="uq_custom_category_kind_name"),
        Index("idx_custom_category_kind", "item_kind"),
    )

    # raw_material or preprocessed_good
    item_kind: Mapped[ItemKind] = mapped_column(String(30), nullable=False)

    # Normalised tag (lower-case, underscores)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    def to_dto(self) -> CategoryInfo:
        return CategoryInfo(
            id=self.id,
            item_kind=ItemKind(self.item_kind),
            name=self.name,
            created_by_id=self.created_by_id,
        )

    def __repr__(self) -> str:
        return f"<CustomCategory {self.item_kind}:{self.name}>"

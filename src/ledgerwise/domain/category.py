"""Category domain service."""

from typing import Optional
from ledgerwise.database.base import Database
from ledgerwise.domain.entities import Category as CategoryEntity
from ledgerwise.domain.errors import ConflictError, NotFoundError, ValidationError


class CategoryService:
    """Service for managing categories used by rules and subscriptions."""

    def __init__(self, db: Database):
        self.db = db

    def create_category(self, name: str, parent_name: Optional[str] = None) -> int:
        """Create a category, optionally under a top-level parent.

        Returns:
            Category ID

        Raises:
            ValidationError: If name is empty
            NotFoundError: If parent category doesn't exist
            ConflictError: If the category already exists under that parent
        """
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty")

        parent_id = None
        if parent_name is not None:
            parent = self.db.get_category_by_name(parent_name)
            if parent is None:
                raise NotFoundError(f"Parent category '{parent_name}' not found")
            parent_id = parent.id

        if self.db.get_category_by_name(name, parent_id=parent_id) is not None:
            raise ConflictError(f"Category '{name}' already exists")

        return self.db.create_category(name=name, parent_id=parent_id)

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        return self.db.get_category(category_id)

    def get_category_by_name(self, name: str) -> Optional[CategoryEntity]:
        """Get a top-level category by name."""
        return self.db.get_category_by_name(name)

    def list_categories(self) -> list[CategoryEntity]:
        return self.db.list_categories()

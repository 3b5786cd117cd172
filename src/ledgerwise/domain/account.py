"""Account domain service."""

from typing import Optional
from ledgerwise.database.base import Database
from ledgerwise.domain.entities import Account as AccountEntity
from ledgerwise.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
)

DEFAULT_ISSUER = "chase"


class AccountService:
    """Service for managing card and bank accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(self, name: str, issuer: str = DEFAULT_ISSUER) -> int:
        """Create a new account.

        Args:
            name: Account name
            issuer: Issuer identifier used to pick a statement parser

        Returns:
            Account ID

        Raises:
            ValidationError: If name or issuer is empty
            ConflictError: If account name already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Account name cannot be empty")
        if not issuer or not issuer.strip():
            raise ValidationError("Issuer cannot be empty")

        if self.db.get_account_by_name(name) is not None:
            raise ConflictError(f"Account with name '{name}' already exists")

        return self.db.create_account(name=name, issuer=issuer.strip().lower())

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def list_accounts(self, active_only: bool = True) -> list[AccountEntity]:
        """List accounts.

        Args:
            active_only: If True, archived accounts are left out

        Returns:
            List of account entities
        """
        return self.db.list_accounts(active_only=active_only)

    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
    ) -> AccountEntity:
        """Rename an account or change its issuer.

        Args:
            account_id: Account ID
            name: New account name (optional)
            issuer: New issuer identifier (optional)

        Returns:
            Updated account

        Raises:
            NotFoundError: If account not found
            ValidationError: If a new value is empty
            ConflictError: If the new name belongs to another account
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

        changes = {}
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Account name cannot be empty")
            existing = self.db.get_account_by_name(name)
            if existing is not None and existing.id != account_id:
                raise ConflictError(f"Account with name '{name}' already exists")
            changes["name"] = name
        if issuer is not None:
            if not issuer.strip():
                raise ValidationError("Issuer cannot be empty")
            changes["issuer"] = issuer.strip().lower()

        if changes:
            self.db.update_account(account_id, changes)
        return self.db.get_account(account_id)

    def archive_account(self, account_id: int) -> None:
        """Archive an account. Its ledger entries are kept.

        Raises:
            NotFoundError: If account not found
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        self.db.set_account_active(account_id, False)

"""Ledger engine: entry bookkeeping, transfer mirroring and balances."""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from cashledger.database.base import Database
from cashledger.domain.category import CategoryService
from cashledger.domain.entities import (
    Account as AccountEntity,
    BalanceView,
    Entry as EntryEntity,
    EntryKind,
)
from cashledger.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    empty_category,
    entry_not_found,
    group_not_found,
    invalid_entry_kind,
    mirror_not_found,
    zero_amount,
)
from cashledger.utils.date_parser import correct_two_digit_year

logger = logging.getLogger(__name__)

MIRROR_TOLERANCE = Decimal("0.01")

# (source name fragment, target name fragment) of transfer routes booked
# without a counter entry on the target account
NON_MIRRORED_ROUTES: tuple[tuple[str, str], ...] = (("bargeld", "giro"),)

EXCLUDED_KINDS = {
    BalanceView.RAW: (EntryKind.RESERVATION.value,),
    BalanceView.EVALUATION: (EntryKind.RESERVATION.value, EntryKind.CASH_DEPOSIT.value),
}


def is_mirrored_route(
    source: AccountEntity,
    target: AccountEntity,
    routes: Iterable[tuple[str, str]] = NON_MIRRORED_ROUTES,
) -> bool:
    """Whether a transfer from source to target gets a mirror entry."""
    source_name = source.name.lower()
    target_name = target.name.lower()
    for source_fragment, target_fragment in routes:
        if source_fragment in source_name and target_fragment in target_name:
            return False
    return True


def _parse_kind(kind) -> EntryKind:
    try:
        return EntryKind(kind)
    except ValueError:
        raise ValidationError(invalid_entry_kind(kind)) from None


def _signed_amount(kind: EntryKind, amount: Decimal) -> Decimal:
    """Amount as stored on the entry's own account."""
    if kind == EntryKind.INCOME:
        return abs(amount)
    if kind == EntryKind.EXPENSE:
        return -abs(amount)
    if kind == EntryKind.TRANSFER:
        # The stated amount leaves the source account
        return -amount
    return amount


class LedgerService:
    """Service for booking entries and computing balances.

    Transfers with a target account are stored as two legs: the source leg
    on the booking account and a mirror on the target account with the
    negated amount, swapped accounts and the same date, category and usage.
    Routes in the non-mirrored table only get the source leg.
    """

    def __init__(self, db: Database, non_mirrored_routes: Iterable[tuple[str, str]] = NON_MIRRORED_ROUTES):
        """Initialize ledger service.

        Args:
            db: Database instance
            non_mirrored_routes: Transfer routes booked without a mirror
        """
        self.db = db
        self.category_service = CategoryService(db)
        self.non_mirrored_routes = tuple(non_mirrored_routes)

    def _require_account(self, account_id: int) -> AccountEntity:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def _require_entry(self, entry_id: int) -> EntryEntity:
        entry = self.db.get_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        return entry

    def _validate(
        self, kind, amount: Decimal, category: Optional[str]
    ) -> tuple[EntryKind, Decimal]:
        entry_kind = _parse_kind(kind)
        amount = Decimal(amount)
        if amount == 0:
            raise ValidationError(zero_amount())
        if category is not None and not category.strip():
            raise ValidationError(empty_category())
        return entry_kind, amount

    def _mirror_target(
        self, kind: EntryKind, source: AccountEntity, target_account_id: Optional[int]
    ) -> Optional[AccountEntity]:
        """Target account that receives a mirror, or None."""
        if kind != EntryKind.TRANSFER or target_account_id is None:
            return None
        if target_account_id == source.id:
            raise ValidationError("Transfer source and target account must differ")
        target = self._require_account(target_account_id)
        if not is_mirrored_route(source, target, self.non_mirrored_routes):
            logger.debug("Route %s -> %s is not mirrored", source.name, target.name)
            return None
        return target

    def create_entry(
        self,
        kind,
        amount: Decimal,
        category: str,
        account_id: int,
        usage: Optional[str],
        entry_date: date,
        target_account_id: Optional[int] = None,
    ) -> list[EntryEntity]:
        """Book an entry.

        Income is stored positive and expenses negative whatever sign is
        passed in. For a transfer, amount is what leaves account_id; with a
        target the mirror books it onto the target account.

        Args:
            kind: Entry kind (EntryKind or its value)
            amount: Amount, must not be zero
            category: Category name, resolved in the account's group
            account_id: Booking account
            usage: Usage text
            entry_date: Booking date
            target_account_id: Transfer target account

        Returns:
            The created entries; source leg first

        Raises:
            ValidationError: If kind, amount or category is invalid
            NotFoundError: If an account doesn't exist
        """
        if category is None:
            raise ValidationError(empty_category())
        entry_kind, amount = self._validate(kind, amount, category)
        account = self._require_account(account_id)
        if entry_kind != EntryKind.TRANSFER:
            target_account_id = None
        mirror_target = self._mirror_target(entry_kind, account, target_account_id)

        source_amount = _signed_amount(entry_kind, amount)
        with self.db.atomic():
            category_entity = self.category_service.resolve_category(category, account.group_id)
            entry_ids = [
                self.db.create_entry(
                    account_id=account.id,
                    date=entry_date,
                    amount=source_amount,
                    kind=entry_kind.value,
                    category_id=category_entity.id,
                    usage=usage,
                    target_account_id=target_account_id,
                )
            ]
            if mirror_target is not None:
                entry_ids.append(
                    self.db.create_entry(
                        account_id=mirror_target.id,
                        date=entry_date,
                        amount=-source_amount,
                        kind=entry_kind.value,
                        category_id=category_entity.id,
                        usage=usage,
                        target_account_id=account.id,
                    )
                )

        return [self.db.get_entry(entry_id) for entry_id in entry_ids]

    def get_entry(self, entry_id: int) -> Optional[EntryEntity]:
        """Get entry by ID."""
        return self.db.get_entry(entry_id)

    def list_entries(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        kinds: Optional[Iterable[EntryKind]] = None,
        category_id: Optional[int] = None,
    ) -> list[EntryEntity]:
        """List entries with optional filters, newest first."""
        kind_values = [EntryKind(k).value for k in kinds] if kinds is not None else None
        return self.db.list_entries(
            account_id=account_id,
            start_date=start_date,
            end_date=end_date,
            kinds=kind_values,
            category_id=category_id,
        )

    def find_mirror(self, entry: EntryEntity) -> Optional[EntryEntity]:
        """Find the counter leg of a transfer entry.

        The mirror lives on the target account, names the entry's account as
        its target, has the same date and the negated amount (within 0.01).
        """
        if entry.kind != EntryKind.TRANSFER or entry.target_account_id is None:
            return None
        candidates = self.db.find_entries(
            account_id=entry.target_account_id,
            amount=-entry.amount,
            tolerance=MIRROR_TOLERANCE,
            on_date=entry.date,
            kind=EntryKind.TRANSFER.value,
            target_account_id=entry.account_id,
        )
        for candidate in candidates:
            if candidate.id != entry.id:
                return candidate
        return None

    def _expects_mirror(self, entry: EntryEntity) -> bool:
        if entry.kind != EntryKind.TRANSFER or entry.target_account_id is None:
            return False
        source = self.db.get_account(entry.account_id)
        target = self.db.get_account(entry.target_account_id)
        if source is None or target is None:
            return False
        return is_mirrored_route(source, target, self.non_mirrored_routes)

    def update_entry(
        self,
        entry_id: int,
        kind=None,
        amount: Optional[Decimal] = None,
        category: Optional[str] = None,
        account_id: Optional[int] = None,
        usage: Optional[str] = None,
        entry_date: Optional[date] = None,
        target_account_id: Optional[int] = None,
    ) -> EntryEntity:
        """Update an entry; fields left as None keep their value.

        Amounts follow the same conventions as create_entry. Transfer legs
        stay symmetric: the mirror is updated, created or removed as the new
        values require. Changing the kind away from transfer drops the
        target account.

        Returns:
            The updated entry

        Raises:
            NotFoundError: If the entry or an account doesn't exist
            ValidationError: If kind, amount or category is invalid
        """
        old = self._require_entry(entry_id)

        new_kind = _parse_kind(kind) if kind is not None else old.kind
        if amount is None:
            # Stated amount of the stored entry, in create_entry's convention
            amount = -old.amount if old.kind == EntryKind.TRANSFER else old.amount
        new_kind, amount = self._validate(new_kind, amount, category)

        account = self._require_account(account_id if account_id is not None else old.account_id)
        if new_kind == EntryKind.TRANSFER:
            if target_account_id is None:
                target_account_id = old.target_account_id
        else:
            target_account_id = None
        old_mirror = self.find_mirror(old)
        if (
            old_mirror is not None
            and new_kind == EntryKind.TRANSFER
            and account.id == old.account_id
            and target_account_id == old.target_account_id
        ):
            # An existing pair stays a pair, whichever leg is edited
            mirror_target = self._require_account(target_account_id)
        else:
            mirror_target = self._mirror_target(new_kind, account, target_account_id)

        new_date = entry_date if entry_date is not None else old.date
        new_usage = usage if usage is not None else old.usage
        source_amount = _signed_amount(new_kind, amount)

        with self.db.atomic():
            if category is not None:
                category_id = self.category_service.resolve_category(category, account.group_id).id
            else:
                category_id = old.category_id

            self.db.update_entry(
                entry_id,
                account_id=account.id,
                date=new_date,
                amount=source_amount,
                kind=new_kind.value,
                category_id=category_id,
                usage=new_usage,
                target_account_id=target_account_id,
            )

            if mirror_target is not None:
                mirror_fields = dict(
                    account_id=mirror_target.id,
                    date=new_date,
                    amount=-source_amount,
                    kind=new_kind.value,
                    category_id=category_id,
                    usage=new_usage,
                    target_account_id=account.id,
                )
                if old_mirror is not None:
                    self.db.update_entry(old_mirror.id, **mirror_fields)
                else:
                    self.db.create_entry(**mirror_fields)
            elif old_mirror is not None:
                logger.info("Removing mirror %s of entry %s", old_mirror.id, entry_id)
                self.db.delete_entry(old_mirror.id)

        return self.db.get_entry(entry_id)

    def delete_entry(self, entry_id: int) -> None:
        """Delete an entry; a transfer's mirror is deleted first.

        A transfer whose mirror cannot be found is still deleted; the gap is
        logged as a warning.

        Raises:
            NotFoundError: If the entry doesn't exist
        """
        entry = self._require_entry(entry_id)
        with self.db.atomic():
            mirror = self.find_mirror(entry)
            if mirror is not None:
                self.db.delete_entry(mirror.id)
            elif self._expects_mirror(entry):
                logger.warning(mirror_not_found(entry.id, entry.date, entry.amount))
            self.db.delete_entry(entry.id)

    def balance(
        self,
        account_id: int,
        view: BalanceView = BalanceView.RAW,
        as_of: Optional[date] = None,
    ) -> Decimal:
        """Balance of one account.

        Reservations never count; the evaluation view also leaves out cash
        deposits.

        Args:
            account_id: Account ID
            view: Raw or evaluation balance
            as_of: Only count entries up to this date (inclusive)

        Raises:
            NotFoundError: If account not found
        """
        self._require_account(account_id)
        return self.db.sum_entry_amounts(
            account_id, exclude_kinds=EXCLUDED_KINDS[BalanceView(view)], end_date=as_of
        )

    def group_balance(
        self,
        group_id: int,
        view: BalanceView = BalanceView.RAW,
        as_of: Optional[date] = None,
    ) -> Decimal:
        """Sum of the balances of a group's accounts that are included in balance.

        Raises:
            NotFoundError: If the group doesn't exist
        """
        if self.db.get_account_group(group_id) is None:
            raise NotFoundError(group_not_found(group_id))
        total = Decimal("0")
        for account in self.db.list_accounts(group_id=group_id):
            if account.included_in_balance:
                total += self.balance(account.id, view, as_of)
        return total

    def balances(
        self, view: BalanceView = BalanceView.RAW, as_of: Optional[date] = None
    ) -> list[tuple[AccountEntity, Decimal]]:
        """Balances of all accounts, in display order."""
        return [
            (account, self.balance(account.id, view, as_of)) for account in self.db.list_accounts()
        ]

    def cleanup_invalid_entries(self) -> int:
        """Delete entries with a zero amount or an unknown kind.

        Returns:
            Number of entries deleted
        """
        removed = self.db.delete_invalid_entries([k.value for k in EntryKind])
        if removed:
            logger.warning("Removed %d invalid entries", removed)
        return removed

    def correct_entry_years(self) -> int:
        """Move entries dated in years below 100 into the 2000s.

        Returns:
            Number of entries corrected
        """
        broken = self.db.list_entries(end_date=date(99, 12, 31))
        with self.db.atomic():
            for entry in broken:
                self.db.update_entry(
                    entry.id,
                    account_id=entry.account_id,
                    date=correct_two_digit_year(entry.date),
                    amount=entry.amount,
                    kind=entry.kind.value,
                    category_id=entry.category_id,
                    usage=entry.usage,
                    target_account_id=entry.target_account_id,
                )
        if broken:
            logger.info("Corrected the year of %d entries", len(broken))
        return len(broken)

"""Resolve account references given on the command line."""

from fintrack.domain.account import AccountService
from fintrack.domain.errors import NotFoundError, ValidationError


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve an account name or ID to an account ID.

    Numeric references are IDs. Names match exactly first, then
    case-insensitively; a case-insensitive match must be unique.

    Raises:
        NotFoundError: If no account matches
        ValidationError: If a name matches several accounts ignoring case
    """
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None

    if account_id is not None:
        if account_service.get_account(account_id) is None:
            raise NotFoundError(f"Account ID {account_id} not found")
        return account_id

    name = str(account).strip()
    accounts = account_service.list_accounts()
    for acc in accounts:
        if acc.name == name:
            return acc.id

    folded = [acc for acc in accounts if acc.name.casefold() == name.casefold()]
    if len(folded) == 1:
        return folded[0].id
    if folded:
        names = ", ".join(f"'{acc.name}'" for acc in folded)
        raise ValidationError(f"Account '{account}' is ambiguous: {names}")
    raise NotFoundError(f"Account '{account}' not found")

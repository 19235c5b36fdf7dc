# =============================================================================
# Account Model
# =============================================================================
# Represents one imported mail credential: the address, its password, the
# OAuth client id and the (long) refresh token used by the backend to get
# access tokens.
#
# IMPORTANT: The password and refresh token are opaque. They are never shown
# in plaintext in the table, never truncated in storage and never included
# in repr() output, so they cannot leak into logs by accident.
# =============================================================================

from dataclasses import dataclass
from datetime import datetime


# What the table shows instead of the password
PASSWORD_MASK = "********"

# How many characters of the refresh token the table shows
TOKEN_PREVIEW_LENGTH = 20


@dataclass(frozen=True)
class AccountFields:
    """
    The four user-supplied fields of an account, without an id.

    This is what the line parser produces and what the backend's create
    operations consume. The backend assigns the id.

    Attributes:
        email: The mail address (human-facing identity, filter key).
        password: Account password (opaque).
        client_id: OAuth client id of the registered application.
        refresh_token: OAuth refresh token (opaque, may be very long).
    """

    email: str
    password: str
    client_id: str
    refresh_token: str

    def __repr__(self) -> str:
        return f"AccountFields(email={self.email!r})"


@dataclass
class AccountRecord:
    """
    An account as stored by the backend.

    Attributes:
        id: Backend-assigned primary key. Unique within a loaded account set.
        email: The mail address. Not guaranteed unique.
        password: Account password (opaque).
        client_id: OAuth client id.
        refresh_token: OAuth refresh token. Display is truncated, the stored
                       value never is.
        created_at: When the backend created the record, if it reports it.

    Example:
        >>> record = AccountRecord(
        ...     id=1,
        ...     email="user@outlook.com",
        ...     password="secret",
        ...     client_id="9e5f94bc-e8a4-4e73-b8be-63364c29d753",
        ...     refresh_token="M.C5_BAY.0.U.-Cg...",
        ... )
        >>> record.masked_password
        '********'
    """

    id: int
    email: str
    password: str
    client_id: str
    refresh_token: str
    created_at: datetime | None = None

    @classmethod
    def from_fields(
        cls,
        account_id: int,
        fields: AccountFields,
        created_at: datetime | None = None,
    ) -> "AccountRecord":
        """Build a record from parsed fields and a backend-assigned id."""
        return cls(
            id=account_id,
            email=fields.email,
            password=fields.password,
            client_id=fields.client_id,
            refresh_token=fields.refresh_token,
            created_at=created_at,
        )

    @property
    def fields(self) -> AccountFields:
        """The user-supplied part of the record."""
        return AccountFields(
            email=self.email,
            password=self.password,
            client_id=self.client_id,
            refresh_token=self.refresh_token,
        )

    @property
    def masked_password(self) -> str:
        """The password as displayed in the table (always masked)."""
        return PASSWORD_MASK

    @property
    def token_preview(self) -> str:
        """
        The refresh token as displayed in the table.

        Tokens longer than TOKEN_PREVIEW_LENGTH are cut and suffixed with
        "...". Only the display is truncated.
        """
        if len(self.refresh_token) <= TOKEN_PREVIEW_LENGTH:
            return self.refresh_token
        return self.refresh_token[:TOKEN_PREVIEW_LENGTH] + "..."

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match of `query` against the email."""
        return query.lower() in self.email.lower()

    def __str__(self) -> str:
        return f"#{self.id} <{self.email}>"

    def __repr__(self) -> str:
        return f"AccountRecord(id={self.id!r}, email={self.email!r})"

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class Friend:
    id: str
    name: str
    phone: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Friend":
        return cls(id=str(raw["id"]), name=str(raw["name"]), phone=str(raw.get("phone", "")))

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class Card:
    id: str
    number: str
    holder: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Card":
        return cls(id=str(raw["id"]), number=str(raw["number"]), holder=str(raw.get("holder", "")))

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class Transfer:
    id: str
    description: str
    amount: float
    currency_code: str
    sender: str
    recipient: str
    is_sender: bool
    date: datetime

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Transfer":
        return cls(
            id=str(raw["id"]),
            description=str(raw.get("description", "")),
            amount=float(raw["amount"]),
            currency_code=str(raw.get("currency_code", "GBP")),
            sender=str(raw.get("sender", "")),
            recipient=str(raw.get("recipient", "")),
            is_sender=bool(raw["is_sender"]),
            date=datetime.fromisoformat(str(raw["date"])),
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data


@dataclass(frozen=True, slots=True)
class ItemViewModel:
    """Display-ready item plus the action fired when it is selected."""

    title: str
    subtitle: str
    select: Callable[[], None] = field(compare=False, repr=False)

    @classmethod
    def for_friend(cls, friend: Friend, selection: Callable[[], None]) -> "ItemViewModel":
        return cls(title=friend.name, subtitle=friend.phone, select=selection)

    @classmethod
    def for_card(cls, card: Card, selection: Callable[[], None]) -> "ItemViewModel":
        return cls(title=card.number, subtitle=card.holder, select=selection)

    @classmethod
    def for_transfer(
        cls, transfer: Transfer, selection: Callable[[], None], *, long_date_style: bool
    ) -> "ItemViewModel":
        title = f"{transfer.amount:,.2f} {transfer.currency_code} • {transfer.description}"
        if long_date_style:
            when = transfer.date.strftime("%d %B %Y at %H:%M")
            subtitle = f"Sent to: {transfer.recipient} on {when}"
        else:
            when = transfer.date.strftime("%d/%m/%Y, %H:%M")
            subtitle = f"Received from: {transfer.sender} on {when}"
        return cls(title=title, subtitle=subtitle, select=selection)

    def to_dict(self) -> dict:
        return {"title": self.title, "subtitle": self.subtitle}


@dataclass(frozen=True, slots=True)
class LoadResult:
    """Terminal outcome of a load: either items or an error, never both."""

    items: tuple[ItemViewModel, ...] | None = None
    error: BaseException | None = None

    def __post_init__(self) -> None:
        if (self.items is None) == (self.error is None):
            raise ValueError("LoadResult needs exactly one of items or error")

    @classmethod
    def success(cls, items: Sequence[ItemViewModel]) -> "LoadResult":
        return cls(items=tuple(items))

    @classmethod
    def failure(cls, error: BaseException) -> "LoadResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> tuple[ItemViewModel, ...]:
        """Return the items, re-raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.items or ()

    def to_dict(self) -> dict:
        if self.error is not None:
            return {"error": f"{type(self.error).__name__}: {self.error}"}
        return {"items": [item.to_dict() for item in self.items or ()]}

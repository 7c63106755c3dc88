"""Balance and settlement calculation over a room's expense events."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from .event import ExpenseEvent


@dataclass(slots=True, frozen=True)
class Balance:
    member: str
    cents: int

    def to_dict(self) -> dict[str, int | str]:
        return {"member": self.member, "cents": self.cents}


@dataclass(slots=True, frozen=True)
class Settlement:
    from_member: str
    to_member: str
    amount_cents: int

    def to_dict(self) -> dict[str, int | str]:
        return {"from": self.from_member, "to": self.to_member, "amountCents": self.amount_cents}


def split_shares(amount_cents: int, split: Sequence[str]) -> dict[str, int]:
    """Divide an amount evenly; the first ``remainder`` members in split order pay one extra cent."""
    share, remainder = divmod(amount_cents, len(split))
    return {member: share + (1 if idx < remainder else 0) for idx, member in enumerate(split)}


def calculate_net(events: Iterable[ExpenseEvent]) -> dict[str, int]:
    net: dict[str, int] = {}
    for event in events:
        if not event.split:
            continue
        for member, share in split_shares(event.amount_cents, event.split).items():
            net[member] = net.get(member, 0) - share
        net[event.payer] = net.get(event.payer, 0) + event.amount_cents
    return net


def compute_balances(events: Iterable[ExpenseEvent]) -> list[Balance]:
    """Net position per member, sorted by member id. Events must already be in ``ts`` order."""
    net = calculate_net(events)
    return [Balance(member=member, cents=net[member]) for member in sorted(net)]


def build_settlements(balances: Iterable[Balance] | Mapping[str, int]) -> list[Settlement]:
    """Greedy largest-debtor against largest-creditor matching.

    Deterministic and bounded by ``members - 1`` payments, though not always
    the theoretical minimum transaction count.
    """
    if isinstance(balances, Mapping):
        entries = [(member, cents) for member, cents in sorted(balances.items())]
    else:
        entries = [(entry.member, entry.cents) for entry in balances]

    creditors = sorted(
        ([name, amount] for name, amount in entries if amount > 0),
        key=lambda item: item[1],
        reverse=True,
    )
    debtors = sorted(
        ([name, -amount] for name, amount in entries if amount < 0),
        key=lambda item: item[1],
        reverse=True,
    )

    settlements: list[Settlement] = []
    c_idx = d_idx = 0
    while c_idx < len(creditors) and d_idx < len(debtors):
        creditor = creditors[c_idx]
        debtor = debtors[d_idx]
        amount = min(creditor[1], debtor[1])
        if amount > 0:
            settlements.append(Settlement(from_member=debtor[0], to_member=creditor[0], amount_cents=amount))

        creditor[1] -= amount
        debtor[1] -= amount
        if creditor[1] == 0:
            c_idx += 1
        if debtor[1] == 0:
            d_idx += 1

    return settlements

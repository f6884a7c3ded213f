"""
Position-unit calculator.

Turns a requested sell amount (token base units) into the notional that is
actually sent to the aggregator, bounded by what the Set holds.
"""

from __future__ import annotations

from set_quoter.core.amounts import SCALE
from set_quoter.core.errors import AmountExceedsAvailable, UnknownComponent
from set_quoter.core.models import SetSnapshot


def implied_max_notional(unit: int, total_supply: int) -> int:
    """Total base units of a component redeemable across the whole Set."""
    return unit * total_supply // SCALE


def calculate_notional(unit: int, total_supply: int, amount: int) -> int:
    """
    Compute the requested notional for a sell of `amount` base units.

    A request equal to the full position is returned unchanged. Anything
    smaller is converted to a per-share unit (floored) and expanded back
    to a notional (floored again), so the result never exceeds what the
    Set can supply even if it no longer matches the literal input.

    Raises:
        AmountExceedsAvailable: if amount is larger than the full position
    """
    implied_max = implied_max_notional(unit, total_supply)

    if amount > implied_max:
        raise AmountExceedsAvailable(
            "Amount is greater than quantity of component in Set",
            amount=amount,
            available=implied_max,
        )
    if amount == implied_max:
        return implied_max

    per_share = amount * SCALE // total_supply
    return per_share * (total_supply // SCALE)


def calculate_from_token_amount(snapshot: SetSnapshot, from_token: str, amount: int) -> int:
    """Requested notional for selling `amount` of `from_token` out of `snapshot`."""
    position = snapshot.position_for(from_token)
    if position is None:
        raise UnknownComponent(
            f"Set {snapshot.address} holds no position in {from_token}",
            component=from_token,
        )
    return calculate_notional(position.unit, snapshot.total_supply, amount)

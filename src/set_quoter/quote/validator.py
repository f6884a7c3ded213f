"""
Quote validator: rejects trades that leave or create dust positions.
"""

from __future__ import annotations

from set_quoter.core.errors import (
    STAGE_VALIDATION,
    AmountExceedsAvailable,
    DustAcquisition,
    DustRemainder,
    UnknownComponent,
)
from set_quoter.core.models import PositionDelta, SetSnapshot

# Smallest non-zero position unit a Set may hold after a trade
DUST_THRESHOLD = 50


def validate_quote_values(
    snapshot: SetSnapshot,
    from_token: str,
    to_token: str,
    delta: PositionDelta,
) -> None:
    """
    Check the post-trade position units against the live Set state.

    Raises:
        UnknownComponent:       the Set holds no from_token
        AmountExceedsAvailable: the quote sells more units than the Set holds
        DustRemainder:          0 < remaining from_token units < DUST_THRESHOLD
        DustAcquisition:        0 < new to_token units < DUST_THRESHOLD
    """
    from_position = snapshot.position_for(from_token)
    if from_position is None:
        raise UnknownComponent(
            f"Set {snapshot.address} holds no position in {from_token}",
            stage=STAGE_VALIDATION,
            component=from_token,
        )

    remaining = from_position.unit - delta.from_units
    if remaining < 0:
        raise AmountExceedsAvailable(
            "Quote sells more units than the Set holds",
            stage=STAGE_VALIDATION,
            current_units=from_position.unit,
            from_units=delta.from_units,
        )
    if 0 < remaining < DUST_THRESHOLD:
        raise DustRemainder(
            "Remaining units too small, incorrectly attempting max",
            remaining_units=remaining,
        )

    to_position = snapshot.position_for(to_token)
    current_to = to_position.unit if to_position is not None else 0
    new_to_units = current_to + delta.to_units
    if 0 < new_to_units < DUST_THRESHOLD:
        raise DustAcquisition("Receive units too small", new_units=new_to_units)

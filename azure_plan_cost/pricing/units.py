from ..config import HOURS_PER_MONTH


def monthly_cost(unit_price: float, unit_of_measure: str, quantity: float) -> float:
    uom = (unit_of_measure or "").lower()

    # ---- Hour-based meters: extrapolate to a full month ----
    if "hour" in uom:
        return unit_price * HOURS_PER_MONTH * quantity

    # ---- GB / operation meters: quantity is already monthly usage ----
    if "gb" in uom and quantity > 0:
        return unit_price * quantity
    if "operation" in uom and quantity > 0:
        return unit_price * quantity

    return unit_price * quantity

"""Resource quantity arithmetic for pod group minimums."""

from decimal import ROUND_CEILING, Decimal

from kubernetes.utils.quantity import parse_quantity


def format_quantity(value: Decimal) -> str:
    """Render a quantity as whole units, or milli-units rounded up when fractional."""
    if value == value.to_integral_value():
        return str(int(value))
    millis = (value * 1000).to_integral_value(rounding=ROUND_CEILING)
    return f"{int(millis)}m"


def add_requests(total: dict[str, str], requests: dict[str, str], times: int = 1) -> dict[str, str]:
    """Return ``total`` plus ``requests`` multiplied by ``times``."""
    out = dict(total)
    for name, quantity in requests.items():
        current = parse_quantity(out[name]) if name in out else Decimal(0)
        out[name] = format_quantity(current + parse_quantity(quantity) * times)
    return out

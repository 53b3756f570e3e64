from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")


def ToMoney(value: Decimal | float | int | str | None) -> Decimal:
    if value is None:
        return Decimal("0.00")
    try:
        return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {value}") from exc


def MoneyToFloat(value: Decimal | float | int | None) -> float:
    return float(ToMoney(value))


def PercentOf(amount: Decimal, percent: int) -> Decimal:
    if percent <= 0:
        return Decimal("0.00")
    return ToMoney(ToMoney(amount) * Decimal(percent) / Decimal(100))

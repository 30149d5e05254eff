from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import Any, Iterable

ZERO = Decimal("0")

# Index 0 is intentionally empty so "Dua Puluh" + "" works for round tens.
_SATUAN = [
    "", "Satu", "Dua", "Tiga", "Empat", "Lima", "Enam",
    "Tujuh", "Delapan", "Sembilan", "Sepuluh", "Sebelas",
]


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a stored or user-supplied amount into a Decimal.

    None counts as zero, matching how the billing screens treat an empty
    amount field. Floats are routed through str() so 0.1 stays 0.1 instead
    of picking up binary noise.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def sum_amounts(amounts: Iterable[Any]) -> Decimal:
    total = ZERO
    for amount in amounts:
        total += to_decimal(amount)
    return total


def is_positive(amount: Any) -> bool:
    return to_decimal(amount) > ZERO


def _whole_rupiah(amount: Any, rounding: str) -> int:
    return int(to_decimal(amount).quantize(Decimal("1"), rounding=rounding))


def format_rupiah(amount: Any, symbol: bool = True) -> str:
    """
    Format an amount Indonesian-style: whole rupiah, '.' as thousands
    separator. Example: 1500000 -> "Rp 1.500.000", -50000 -> "-Rp 50.000".
    """
    value = _whole_rupiah(amount, ROUND_HALF_UP)
    digits = f"{abs(value):,}".replace(",", ".")
    text = f"Rp {digits}" if symbol else digits
    return f"-{text}" if value < 0 else text


def _terbilang(n: int) -> str:
    if n < 12:
        return _SATUAN[n]
    if n < 20:
        return _SATUAN[n - 10] + " Belas"
    if n < 100:
        return _SATUAN[n // 10] + " Puluh " + _SATUAN[n % 10]
    if n < 200:
        return "Seratus " + _terbilang(n - 100)
    if n < 1000:
        return _SATUAN[n // 100] + " Ratus " + _terbilang(n % 100)
    if n < 2000:
        return "Seribu " + _terbilang(n - 1000)
    if n < 1_000_000:
        return _terbilang(n // 1000) + " Ribu " + _terbilang(n % 1000)
    if n < 1_000_000_000:
        return _terbilang(n // 1_000_000) + " Juta " + _terbilang(n % 1_000_000)
    if n < 1_000_000_000_000:
        return _terbilang(n // 1_000_000_000) + " Milyar " + _terbilang(n % 1_000_000_000)
    if n < 1_000_000_000_000_000:
        return _terbilang(n // 1_000_000_000_000) + " Triliun " + _terbilang(n % 1_000_000_000_000)
    return ""


def terbilang(amount: Any) -> str:
    """
    Spell out the whole-rupiah part of an amount in Indonesian, as printed
    under the totals of an invoice ("Satu Juta Lima Ratus Ribu Rupiah").
    Sen are dropped, not rounded.
    """
    value = _whole_rupiah(amount, ROUND_DOWN)
    if value == 0:
        return "Nol Rupiah"
    words = " ".join(_terbilang(abs(value)).split())
    if value < 0:
        words = f"Minus {words}"
    return f"{words} Rupiah"

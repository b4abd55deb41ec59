# percetakan/utils/formatting.py

def format_rupiah(n: float) -> str:
    """
    Format a number Indonesian-style with '.' as thousands separator and no
    decimals. Example: 1234567 -> "1.234.567"
    """
    return f"{n:,.0f}".replace(",", ".")


def format_currency(n: float) -> str:
    """
    Rupiah with currency prefix. Example: -1500 -> "-Rp 1.500"
    """
    if round(n) < 0:
        return f"-Rp {format_rupiah(abs(n))}"
    return f"Rp {format_rupiah(abs(n))}"


def format_number(n: float) -> str:
    # quantities: drop a trailing ".0", keep real fractions
    if float(n).is_integer():
        return str(int(n))
    return f"{n:g}"

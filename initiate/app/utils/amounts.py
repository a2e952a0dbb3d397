from decimal import Context, Decimal
from typing import Union

# from_wei results can carry all 78 digits of a uint256
_EXACT = Context(prec=999)


def display_amount(value: Union[int, Decimal]) -> str:
    """
    Render a from_wei / from_wei_decimals result as a plain decimal string.

    Decimal("0.000500") -> "0.0005", Decimal("1E+2") -> "100"
    """
    return format(Decimal(value).normalize(_EXACT), "f")

"""Order pricing from line snapshots.

Tax is a flat 18% of the item total and shipping is free. All amounts are
rounded to two decimals.
"""

TAX_RATE = 0.18
SHIPPING_PRICE = 0.0
CURRENCY = "INR"


def compute_pricing(lines):
    """Return the pricing breakdown for `lines` (dicts with ``price`` and ``quantity``)."""
    items_price = round(sum(line["price"] * line["quantity"] for line in lines), 2)
    tax_price = round(items_price * TAX_RATE, 2)
    shipping_price = SHIPPING_PRICE

    return {
        "items_price": items_price,
        "shipping_price": shipping_price,
        "tax_price": tax_price,
        "total_price": round(items_price + shipping_price + tax_price, 2),
        "currency": CURRENCY,
    }

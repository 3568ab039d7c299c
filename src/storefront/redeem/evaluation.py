"""Choosing the redeem rule that applies to an order total."""


def select_rule(order_total, rules):
    """Return the active rule with the highest threshold not above `order_total`.

    Rules do not stack: at most one rule applies. Returns None when no active
    rule qualifies.
    """
    candidates = sorted(
        (rule for rule in rules if rule.is_active),
        key=lambda rule: rule.min_order_value,
        reverse=True,
    )
    return next((rule for rule in candidates if rule.min_order_value <= order_total), None)

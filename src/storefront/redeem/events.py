"""Domain events for redeem rules and the point value setting."""

from protean.fields import Boolean, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="RedeemRule")
class RedeemRuleCreated:
    __version__ = 1

    rule_id = Identifier(required=True)
    name = String(required=True)
    min_order_value = Float(required=True)
    redeem_points = Integer(required=True)
    is_active = Boolean(required=True)


@storefront.event(part_of="RedeemRule")
class RedeemRuleUpdated:
    __version__ = 1

    rule_id = Identifier(required=True)
    min_order_value = Float(required=True)
    redeem_points = Integer(required=True)
    is_active = Boolean(required=True)


@storefront.event(part_of="RedeemPointValue")
class PointValueChanged:
    __version__ = 1

    setting_id = Identifier(required=True)
    previous_value = Float()
    point_value = Float(required=True)

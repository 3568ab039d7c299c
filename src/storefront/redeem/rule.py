"""RedeemRule aggregate — order value threshold that earns a fixed number of points."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Float, Integer, String
from protean.utils.query import Q

from storefront.domain import storefront
from storefront.redeem.events import RedeemRuleCreated, RedeemRuleUpdated
from storefront.utils.pagination import paginate

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


@storefront.aggregate
class RedeemRule:
    name = String(required=True, max_length=100)
    description = String(required=True, max_length=500)
    min_order_value = Float(required=True, min_value=0.0)
    redeem_points = Integer(required=True, min_value=1)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, name, description, min_order_value, redeem_points, is_active=True):
        now = datetime.now(UTC)
        rule = cls(
            name=name,
            description=description,
            min_order_value=min_order_value,
            redeem_points=redeem_points,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        rule.raise_(
            RedeemRuleCreated(
                rule_id=str(rule.id),
                name=name,
                min_order_value=min_order_value,
                redeem_points=redeem_points,
                is_active=is_active,
            )
        )
        return rule

    def update(
        self,
        name=_UNSET,
        description=_UNSET,
        min_order_value=_UNSET,
        redeem_points=_UNSET,
        is_active=_UNSET,
    ):
        if name is not _UNSET:
            self.name = name
        if description is not _UNSET:
            self.description = description
        if min_order_value is not _UNSET:
            self.min_order_value = min_order_value
        if redeem_points is not _UNSET:
            self.redeem_points = redeem_points
        if is_active is not _UNSET:
            self.is_active = is_active
        self.updated_at = datetime.now(UTC)

        self.raise_(
            RedeemRuleUpdated(
                rule_id=str(self.id),
                min_order_value=self.min_order_value,
                redeem_points=self.redeem_points,
                is_active=self.is_active,
            )
        )


@storefront.repository(part_of=RedeemRule)
class RedeemRuleRepository:
    def active_rules(self) -> list[RedeemRule]:
        return self._dao.query.filter(is_active=True).limit(1000).all().items

    def find_by_min_order_value(self, min_order_value) -> RedeemRule | None:
        results = self._dao.query.filter(min_order_value=min_order_value).all().items
        return results[0] if results else None

    def search(self, is_active=None, search=None, page=1, limit=10):
        """Admin listing, lowest threshold first."""
        query = self._dao.query
        if is_active is not None:
            query = query.filter(is_active=is_active)
        if search:
            query = query.filter(Q(name__icontains=search) | Q(description__icontains=search))
        return paginate(query.order_by("min_order_value"), page, limit)

    def remove(self, rule: RedeemRule) -> None:
        """Delete a rule outright. Orders keep the points they already earned."""
        self._dao.delete(rule)

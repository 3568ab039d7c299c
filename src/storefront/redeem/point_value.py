"""RedeemPointValue — what one redeem point is worth in currency.

There is a single active setting. Reading it before anyone has set it
creates the default of 1.0.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.fields import Boolean, DateTime, Float
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.redeem.events import PointValueChanged

logger = structlog.get_logger(__name__)

DEFAULT_POINT_VALUE = 1.0
MIN_POINT_VALUE = 0.01


@storefront.aggregate
class RedeemPointValue:
    point_value = Float(required=True, min_value=MIN_POINT_VALUE)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, point_value=DEFAULT_POINT_VALUE):
        now = datetime.now(UTC)
        return cls(point_value=point_value, is_active=True, created_at=now, updated_at=now)

    def change(self, point_value):
        previous = self.point_value
        self.point_value = point_value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            PointValueChanged(
                setting_id=str(self.id),
                previous_value=previous,
                point_value=point_value,
            )
        )


@storefront.repository(part_of=RedeemPointValue)
class RedeemPointValueRepository:
    def find_active(self) -> RedeemPointValue | None:
        results = self._dao.query.filter(is_active=True).all().items
        return results[0] if results else None


@storefront.command(part_of="RedeemPointValue")
class SetPointValue:
    point_value = Float(required=True, min_value=MIN_POINT_VALUE)


@storefront.command_handler(part_of=RedeemPointValue)
class PointValueHandler:
    @handle(SetPointValue)
    def set_point_value(self, command):
        repo = current_domain.repository_for(RedeemPointValue)
        setting = repo.find_active()
        if setting is None:
            setting = RedeemPointValue.create(command.point_value)
        else:
            setting.change(command.point_value)
        repo.add(setting)

        logger.info("Redeem point value set", point_value=command.point_value)
        return setting.point_value


def current_point_value() -> RedeemPointValue:
    """Return the active setting, creating the default one if none exists."""
    repo = current_domain.repository_for(RedeemPointValue)
    setting = repo.find_active()
    if setting is None:
        setting = RedeemPointValue.create()
        repo.add(setting)
    return setting

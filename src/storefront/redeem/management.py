"""Redeem rule administration — commands and handler."""

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import ConflictError
from storefront.redeem.rule import RedeemRule

logger = structlog.get_logger(__name__)

_UPDATABLE_FIELDS = ("name", "description", "min_order_value", "redeem_points", "is_active")


@storefront.command(part_of="RedeemRule")
class CreateRedeemRule:
    name = String(required=True, max_length=100)
    description = String(required=True, max_length=500)
    min_order_value = Float(required=True, min_value=0.0)
    redeem_points = Integer(required=True, min_value=1)
    is_active = Boolean(default=True)


@storefront.command(part_of="RedeemRule")
class UpdateRedeemRule:
    rule_id = Identifier(required=True)
    name = String(max_length=100)
    description = String(max_length=500)
    min_order_value = Float(min_value=0.0)
    redeem_points = Integer(min_value=1)
    is_active = Boolean()


@storefront.command(part_of="RedeemRule")
class DeleteRedeemRule:
    rule_id = Identifier(required=True)


def _ensure_threshold_free(repo, min_order_value, rule_id=None):
    existing = repo.find_by_min_order_value(min_order_value)
    if existing is not None and str(existing.id) != str(rule_id):
        raise ConflictError({"min_order_value": ["A rule with this minimum order value already exists"]})


@storefront.command_handler(part_of=RedeemRule)
class ManageRedeemRuleHandler:
    @handle(CreateRedeemRule)
    def create_rule(self, command):
        repo = current_domain.repository_for(RedeemRule)
        _ensure_threshold_free(repo, command.min_order_value)

        rule = RedeemRule.create(
            name=command.name,
            description=command.description,
            min_order_value=command.min_order_value,
            redeem_points=command.redeem_points,
            is_active=True if command.is_active is None else command.is_active,
        )
        repo.add(rule)

        logger.info("Redeem rule created", rule_id=str(rule.id), min_order_value=rule.min_order_value)
        return str(rule.id)

    @handle(UpdateRedeemRule)
    def update_rule(self, command):
        repo = current_domain.repository_for(RedeemRule)
        rule = repo.get(command.rule_id)

        changes = {
            field: getattr(command, field) for field in _UPDATABLE_FIELDS if getattr(command, field) is not None
        }
        if "min_order_value" in changes and changes["min_order_value"] != rule.min_order_value:
            _ensure_threshold_free(repo, changes["min_order_value"], rule_id=rule.id)

        rule.update(**changes)
        repo.add(rule)

    @handle(DeleteRedeemRule)
    def delete_rule(self, command):
        repo = current_domain.repository_for(RedeemRule)
        rule = repo.get(command.rule_id)
        repo.remove(rule)

        logger.info("Redeem rule deleted", rule_id=str(command.rule_id))

"""
Per-request service wiring.

External clients are built here and injected, so tests replace them with
``app.dependency_overrides``.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from billing.stripe_client import StripeClient
from billing.subscription_manager import SubscriptionManager
from billing.webhook_handler import StripeWebhookHandler
from core.audit_logger import AuditLogger
from core.contract_sharing import ContractSharingService
from core.notification_sender import NotificationSender, get_notification_sender
from core.organization_service import OrganizationService
from database import get_db
from utils.request_utils import get_client_ip, get_user_agent


def get_stripe_client() -> StripeClient:
    return StripeClient()


def get_audit_logger(request: Request, db: Session = Depends(get_db)) -> AuditLogger:
    return AuditLogger(db, client_ip=get_client_ip(request), user_agent=get_user_agent(request))


def get_organization_service(
    db: Session = Depends(get_db),
    audit: AuditLogger = Depends(get_audit_logger),
    notifier: NotificationSender = Depends(get_notification_sender),
    stripe_client: StripeClient = Depends(get_stripe_client)
) -> OrganizationService:
    return OrganizationService(db, audit, notifier, stripe_client)


def get_contract_sharing_service(
    db: Session = Depends(get_db),
    audit: AuditLogger = Depends(get_audit_logger),
    notifier: NotificationSender = Depends(get_notification_sender)
) -> ContractSharingService:
    return ContractSharingService(db, audit, notifier)


def get_subscription_manager(
    db: Session = Depends(get_db),
    audit: AuditLogger = Depends(get_audit_logger),
    notifier: NotificationSender = Depends(get_notification_sender),
    stripe_client: StripeClient = Depends(get_stripe_client)
) -> SubscriptionManager:
    return SubscriptionManager(db, stripe_client, audit, notifier)


def get_webhook_handler(
    stripe_client: StripeClient = Depends(get_stripe_client),
    subscription_manager: SubscriptionManager = Depends(get_subscription_manager)
) -> StripeWebhookHandler:
    return StripeWebhookHandler(stripe_client, subscription_manager)

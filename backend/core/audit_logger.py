"""
Audit Logger

Best-effort, append-only audit trail for state-changing actions performed
inside an organization. A failed audit write is logged and discarded; it
never changes the outcome of the operation that triggered it.
"""

import logging
from typing import Optional, Union
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from auth.models import AuthenticatedPrincipal
from models.audit_log import AuditLog, ResourceType


logger = logging.getLogger(__name__)


class AuditLogger:
    """
    Writes AuditLog rows through the request's database session.

    Callers commit their own changes before recording, so a rollback here
    only discards the audit entry.
    """

    def __init__(self, db: Session, client_ip: Optional[str] = None, user_agent: Optional[str] = None):
        self.db = db
        self.client_ip = client_ip
        self.user_agent = user_agent

    def record(
        self,
        actor: AuthenticatedPrincipal,
        action: str,
        resource_type: Union[ResourceType, str],
        resource_id: Optional[Union[UUID, str]] = None,
        details: Optional[str] = None
    ) -> Optional[AuditLog]:
        """Record an action of an organization member; no-op for users outside one"""
        if actor is None or actor.organization_id is None:
            return None

        return self.record_event(
            organization_id=actor.organization_id,
            user_id=actor.id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            details=details,
        )

    def record_event(
        self,
        organization_id: Union[UUID, str],
        user_id: Union[UUID, str],
        action: str,
        resource_type: Union[ResourceType, str],
        resource_id: Optional[Union[UUID, str]] = None,
        details: Optional[str] = None,
        client_ip: Optional[str] = None
    ) -> Optional[AuditLog]:
        """Record an action with an explicit organization scope"""
        try:
            resource_type = ResourceType(resource_type).value
            entry = AuditLog(
                organization_id=_as_uuid(organization_id),
                user_id=_as_uuid(user_id),
                action=action,
                resource_type=resource_type,
                resource_id=str(resource_id) if resource_id is not None else None,
                details=details or f"User performed {action} on {resource_type}",
                ip_address=client_ip or self.client_ip,
                user_agent=self.user_agent,
            )
            self.db.add(entry)
            self.db.commit()
        except Exception as e:
            logger.error(f"Error creating audit log for {action}: {e}")
            try:
                self.db.rollback()
            except SQLAlchemyError as rollback_error:
                logger.error(f"Rollback after failed audit write also failed: {rollback_error}")
            return None

        logger.debug(f"Audit: {action} on {resource_type} by {user_id} in {organization_id}")
        return entry


def _as_uuid(value: Union[UUID, str]) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))

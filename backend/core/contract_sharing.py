"""
Contract Sharing

Shares analysed contracts with members of the owner's organization and
keeps the per-organization sharing record (audience, access level, history
and comments) up to date.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session, joinedload

from auth.models import AuthenticatedPrincipal
from models.audit_log import ResourceType
from models.base import utcnow
from models.contract import Contract
from models.team_contract import TeamContract, AccessLevel
from models.user import User
from .audit_logger import AuditLogger
from .exceptions import AuthorizationDeniedError, NotFoundError, ValidationFailedError
from .notification_sender import NotificationSender


logger = logging.getLogger(__name__)

VALID_ACCESS_LEVELS = {level.value for level in AccessLevel}


def history_entry(changed_by: UUID, action: str, details: str) -> dict:
    return {
        "changedBy": str(changed_by),
        "timestamp": utcnow().isoformat(),
        "action": action,
        "details": details,
    }


def _parse_uuid(value) -> Optional[UUID]:
    try:
        return value if isinstance(value, UUID) else UUID(str(value))
    except ValueError:
        return None


class ContractSharingService:
    """Team sharing operations on behalf of an enterprise member"""

    def __init__(self, db: Session, audit: AuditLogger, notifier: Optional[NotificationSender] = None):
        self.db = db
        self.audit = audit
        self.notifier = notifier

    def share_contract(
        self,
        principal: AuthenticatedPrincipal,
        contract_id: str,
        shared_with: List[str],
        access_level: Optional[str] = None,
        message: Optional[str] = None
    ) -> TeamContract:
        """
        Share one of the caller's contracts with members of their organization.

        The audience is merged with any existing audience for the same
        contract; nothing is written when a single audience member falls
        outside the organization.

        Raises:
            ValidationFailedError: Bad access level or audience outside the organization
            NotFoundError: Contract missing or not owned by the caller
        """
        if access_level is not None and access_level not in VALID_ACCESS_LEVELS:
            raise ValidationFailedError(
                "Invalid access level",
                f"Access level must be one of: {', '.join(sorted(VALID_ACCESS_LEVELS))}"
            )

        contract = None
        contract_uuid = _parse_uuid(contract_id)
        if contract_uuid is not None:
            contract = self.db.query(Contract).filter(
                Contract.id == contract_uuid,
                Contract.user_id == principal.id
            ).first()
        if contract is None:
            raise NotFoundError("Contract not found or you don't have permission to share it")

        audience = self._validate_audience(principal, shared_with)

        team_contract = self.db.query(TeamContract).filter(
            TeamContract.contract_id == contract.id,
            TeamContract.organization_id == principal.organization_id
        ).first()

        if team_contract is not None:
            merged = list(team_contract.shared_with or [])
            merged.extend(user_id for user_id in audience if user_id not in merged)
            team_contract.shared_with = merged
            if access_level is not None:
                team_contract.access_level = access_level
            team_contract.history = list(team_contract.history or []) + [
                history_entry(principal.id, "update_sharing", message or "Updated sharing settings")
            ]
        else:
            team_contract = TeamContract(
                contract_id=contract.id,
                organization_id=principal.organization_id,
                shared_by=principal.id,
                shared_with=audience,
                access_level=access_level or AccessLevel.VIEW.value,
                history=[
                    history_entry(
                        principal.id,
                        "initial_sharing",
                        message or f"Contract shared with {len(audience)} team members"
                    )
                ],
                comments=[],
            )
            self.db.add(team_contract)

        self.db.commit()
        self.db.refresh(team_contract)
        logger.info(f"Contract {contract.id} shared with {len(audience)} users by {principal.id}")

        self.audit.record(
            principal,
            action="contract_shared",
            resource_type=ResourceType.CONTRACT,
            resource_id=contract.id,
            details=f"Shared contract with {len(audience)} team members",
        )
        return team_contract

    def _validate_audience(self, principal: AuthenticatedPrincipal, shared_with: List[str]) -> List[str]:
        """Deduplicated audience as user id strings, all inside the caller's organization"""
        audience_ids: List[UUID] = []
        for raw in shared_with:
            user_id = _parse_uuid(raw)
            if user_id is None:
                raise ValidationFailedError("Some users are not in your organization")
            if user_id not in audience_ids:
                audience_ids.append(user_id)

        if audience_ids:
            found = self.db.query(User.id).filter(
                User.id.in_(audience_ids),
                User.organization_id == principal.organization_id
            ).count()
            if found != len(audience_ids):
                raise ValidationFailedError("Some users are not in your organization")

        return [str(user_id) for user_id in audience_ids]

    def list_org_contracts(self, principal: AuthenticatedPrincipal) -> List[TeamContract]:
        """Team contracts of the caller's organization that the caller shared or can see"""
        caller = str(principal.id)
        # Text match narrows candidates; membership is confirmed on the decoded list below
        rows = self.db.query(TeamContract).options(
            joinedload(TeamContract.contract),
            joinedload(TeamContract.sharer)
        ).filter(
            TeamContract.organization_id == principal.organization_id,
            or_(
                TeamContract.shared_by == principal.id,
                cast(TeamContract.shared_with, String).like(f"%{caller}%")
            )
        ).order_by(TeamContract.updated_at.desc()).all()

        visible = [
            row for row in rows
            if row.shared_by == principal.id or caller in (row.shared_with or [])
        ]

        self.audit.record(
            principal,
            action="viewed_team_contracts",
            resource_type=ResourceType.CONTRACT,
            details=f"Viewed {len(visible)} team contracts",
        )
        return visible

    async def add_comment(self, principal: AuthenticatedPrincipal, team_contract_id: str, text: str) -> TeamContract:
        """
        Comment on a shared contract and notify the other participants.

        Raises:
            NotFoundError: Unknown record, or caller is not a participant
            AuthorizationDeniedError: Caller only has view access
        """
        team_contract = None
        record_id = _parse_uuid(team_contract_id)
        if record_id is not None:
            team_contract = self.db.query(TeamContract).filter(
                TeamContract.id == record_id,
                TeamContract.organization_id == principal.organization_id
            ).first()

        caller = str(principal.id)
        is_sharer = team_contract is not None and team_contract.shared_by == principal.id
        in_audience = team_contract is not None and caller in (team_contract.shared_with or [])
        if not (is_sharer or in_audience):
            raise NotFoundError("Team contract not found")

        if not is_sharer and team_contract.access_level == AccessLevel.VIEW.value:
            raise AuthorizationDeniedError("Your access level does not allow commenting")

        now = utcnow().isoformat()
        team_contract.comments = list(team_contract.comments or []) + [
            {"userId": caller, "text": text, "timestamp": now}
        ]
        team_contract.history = list(team_contract.history or []) + [
            history_entry(principal.id, "comment_added", f"{principal.display_name} added a comment")
        ]
        self.db.commit()
        self.db.refresh(team_contract)

        self.audit.record(
            principal,
            action="contract_commented",
            resource_type=ResourceType.CONTRACT,
            resource_id=team_contract.contract_id,
        )

        await self._notify_participants(principal, team_contract, text)
        return team_contract

    async def _notify_participants(self, principal: AuthenticatedPrincipal, team_contract: TeamContract, text: str):
        if self.notifier is None:
            return

        participant_ids = {team_contract.shared_by}
        participant_ids.update(
            user_id for user_id in (_parse_uuid(raw) for raw in team_contract.shared_with or []) if user_id
        )
        participant_ids.discard(principal.id)
        if not participant_ids:
            return

        contract = team_contract.contract
        contract_name = f"{contract.contract_type} contract" if contract else "Shared contract"
        contract_url = f"{self.notifier.config.client_url}/enterprise/contracts/{team_contract.id}"

        recipients = self.db.query(User).filter(User.id.in_(participant_ids)).all()
        for recipient in recipients:
            await self.notifier.send_contract_comment(
                user_email=recipient.email,
                user_name=recipient.display_name,
                commenter_name=principal.display_name,
                contract_name=contract_name,
                comment_text=text,
                contract_url=contract_url,
            )

"""
Tests for team contract sharing, listing and comments
"""

from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from core.contract_sharing import ContractSharingService
from models.audit_log import AuditLog
from models.team_contract import TeamContract
from factories import make_user, make_organization, add_member, make_contract, auth_headers


@pytest.fixture
def team(db_session):
    """An organization with an admin who owns a contract and three members"""
    admin = make_user(db_session, display_name="Ada Admin")
    organization = make_organization(db_session, admin, max_users=10)
    members = [add_member(db_session, organization) for _ in range(3)]
    contract = make_contract(db_session, admin)
    return {
        "admin": admin,
        "organization": organization,
        "members": members,
        "contract": contract,
    }


def share(client, user, contract, shared_with, **fields):
    body = {"contractId": str(contract.id), "sharedWith": [str(user_id) for user_id in shared_with]}
    body.update(fields)
    return client.post("/enterprise/share-contract", json=body, headers=auth_headers(user))


class TestShareContract:

    def test_initial_share(self, client, db_session, team):
        alice, bob, _ = team["members"]

        response = share(client, team["admin"], team["contract"], [alice.id, bob.id], message="Please review")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        record = body["teamContract"]
        assert record["sharedWith"] == [str(alice.id), str(bob.id)]
        assert record["accessLevel"] == "view"
        assert record["status"] == "draft"
        assert record["version"] == 1
        assert len(record["history"]) == 1
        assert record["history"][0]["action"] == "initial_sharing"
        assert record["history"][0]["details"] == "Please review"
        assert record["history"][0]["changedBy"] == str(team["admin"].id)

        entry = db_session.query(AuditLog).one()
        assert entry.action == "contract_shared"
        assert entry.resource_id == str(team["contract"].id)

    def test_reshare_merges_audience(self, client, db_session, team):
        alice, bob, carol = team["members"]

        share(client, team["admin"], team["contract"], [alice.id, bob.id])
        response = share(client, team["admin"], team["contract"], [bob.id, carol.id], accessLevel="comment")

        assert response.status_code == 200
        record = response.json()["teamContract"]
        assert record["sharedWith"] == [str(alice.id), str(bob.id), str(carol.id)]
        assert record["accessLevel"] == "comment"
        assert [item["action"] for item in record["history"]] == ["initial_sharing", "update_sharing"]
        assert db_session.query(TeamContract).count() == 1

    def test_reshare_keeps_access_level_when_omitted(self, client, team):
        alice, bob, _ = team["members"]

        share(client, team["admin"], team["contract"], [alice.id], accessLevel="edit")
        response = share(client, team["admin"], team["contract"], [bob.id])

        assert response.json()["teamContract"]["accessLevel"] == "edit"

    def test_reshare_same_audience_adds_no_duplicates(self, client, team):
        alice = team["members"][0]

        share(client, team["admin"], team["contract"], [alice.id])
        response = share(client, team["admin"], team["contract"], [alice.id, alice.id])

        record = response.json()["teamContract"]
        assert record["sharedWith"] == [str(alice.id)]
        assert len(record["history"]) == 2

    def test_outsider_in_audience_persists_nothing(self, client, db_session, team):
        alice = team["members"][0]
        stranger = make_user(db_session)

        response = share(client, team["admin"], team["contract"], [alice.id, stranger.id])

        assert response.status_code == 400
        assert response.json() == {"error": "Some users are not in your organization"}
        assert db_session.query(TeamContract).count() == 0
        assert db_session.query(AuditLog).count() == 0

    def test_malformed_audience_id(self, client, db_session, team):
        response = share(client, team["admin"], team["contract"], ["not-a-uuid"])

        assert response.status_code == 400
        assert db_session.query(TeamContract).count() == 0

    def test_contract_must_belong_to_caller(self, client, db_session, team):
        alice, bob, _ = team["members"]

        response = share(client, alice, team["contract"], [bob.id])

        assert response.status_code == 404
        assert db_session.query(TeamContract).count() == 0

    def test_unknown_contract(self, client, team):
        response = client.post(
            "/enterprise/share-contract",
            json={"contractId": str(uuid4()), "sharedWith": []},
            headers=auth_headers(team["admin"]),
        )
        assert response.status_code == 404

    def test_invalid_access_level(self, client, db_session, team):
        alice = team["members"][0]

        response = share(client, team["admin"], team["contract"], [alice.id], accessLevel="owner")

        assert response.status_code == 400
        assert db_session.query(TeamContract).count() == 0

    def test_missing_fields(self, client, team):
        response = client.post(
            "/enterprise/share-contract",
            json={"contractId": str(team["contract"].id)},
            headers=auth_headers(team["admin"]),
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"


class TestOrgContracts:

    def test_visible_to_sharer_and_audience_only(self, client, db_session, team):
        alice, _, carol = team["members"]
        share(client, team["admin"], team["contract"], [alice.id])

        for user, expected in ((team["admin"], 1), (alice, 1), (carol, 0)):
            response = client.get("/enterprise/org-contracts", headers=auth_headers(user))
            assert response.status_code == 200
            assert len(response.json()) == expected

    def test_resolves_contract_and_sharer(self, client, team):
        alice = team["members"][0]
        share(client, team["admin"], team["contract"], [alice.id])

        response = client.get("/enterprise/org-contracts", headers=auth_headers(alice))

        record = response.json()[0]
        assert record["contract"]["contractType"] == "Employment"
        assert record["contract"]["summary"] == team["contract"].summary
        assert record["contract"]["overallScore"] == 72
        assert record["sharer"]["displayName"] == "Ada Admin"
        assert record["sharer"]["email"] == team["admin"].email

    def test_listing_is_audited(self, client, db_session, team):
        alice = team["members"][0]

        client.get("/enterprise/org-contracts", headers=auth_headers(alice))

        entry = db_session.query(AuditLog).one()
        assert entry.action == "viewed_team_contracts"
        assert entry.user_id == alice.id

    def test_other_organization_is_invisible(self, client, db_session, team):
        share(client, team["admin"], team["contract"], [team["members"][0].id])
        other_admin = make_user(db_session)
        make_organization(db_session, other_admin)

        response = client.get("/enterprise/org-contracts", headers=auth_headers(other_admin))

        assert response.json() == []

    def test_audience_match_is_exact(self, client, db_session, team):
        alice, bob, _ = team["members"]
        share(client, team["admin"], team["contract"], [alice.id])
        record = db_session.query(TeamContract).one()
        # An id that only contains bob's id as a substring must not grant access
        record.shared_with = [str(alice.id), f"x{bob.id}"]
        db_session.commit()

        response = client.get("/enterprise/org-contracts", headers=auth_headers(bob))

        assert response.json() == []

    def test_store_failure_renders_error_body(self, client, monkeypatch, team):
        def unavailable(self, principal):
            raise OperationalError("SELECT team_contracts", {}, Exception("connection reset"))

        monkeypatch.setattr(ContractSharingService, "list_org_contracts", unavailable)

        response = client.get("/enterprise/org-contracts", headers=auth_headers(team["admin"]))

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to get organization contracts"
        assert "connection reset" in response.json()["message"]


class TestComments:

    def comment(self, client, user, record_id, text="Clause 4 needs a cap on liability"):
        return client.post(
            f"/enterprise/team-contracts/{record_id}/comments",
            json={"text": text},
            headers=auth_headers(user),
        )

    def test_audience_with_comment_access(self, client, db_session, notifier, team):
        alice, bob, _ = team["members"]
        record_id = share(client, team["admin"], team["contract"], [alice.id, bob.id],
                          accessLevel="comment").json()["teamContract"]["id"]

        response = self.comment(client, alice, record_id)

        assert response.status_code == 200
        record = response.json()["teamContract"]
        assert record["comments"][0]["userId"] == str(alice.id)
        assert record["comments"][0]["text"] == "Clause 4 needs a cap on liability"
        assert record["history"][-1]["action"] == "comment_added"

        assert db_session.query(AuditLog).filter(AuditLog.action == "contract_commented").count() == 1
        recipients = sorted(email["to"] for email in notifier.sent)
        assert recipients == sorted([team["admin"].email, bob.email])

    def test_view_access_cannot_comment(self, client, team):
        alice = team["members"][0]
        record_id = share(client, team["admin"], team["contract"], [alice.id]).json()["teamContract"]["id"]

        response = self.comment(client, alice, record_id)

        assert response.status_code == 403

    def test_sharer_can_always_comment(self, client, team):
        alice = team["members"][0]
        record_id = share(client, team["admin"], team["contract"], [alice.id]).json()["teamContract"]["id"]

        response = self.comment(client, team["admin"], record_id)

        assert response.status_code == 200

    def test_non_participant(self, client, team):
        alice, _, carol = team["members"]
        record_id = share(client, team["admin"], team["contract"], [alice.id],
                          accessLevel="edit").json()["teamContract"]["id"]

        assert self.comment(client, carol, record_id).status_code == 404
        assert self.comment(client, carol, uuid4()).status_code == 404

    def test_empty_comment(self, client, team):
        alice = team["members"][0]
        record_id = share(client, team["admin"], team["contract"], [alice.id],
                          accessLevel="comment").json()["teamContract"]["id"]

        assert self.comment(client, alice, record_id, text="").status_code == 400

    def test_store_failure_renders_error_body(self, client, monkeypatch, team):
        async def unavailable(self, principal, team_contract_id, text):
            raise OperationalError("UPDATE team_contracts", {}, Exception("connection reset"))

        monkeypatch.setattr(ContractSharingService, "add_comment", unavailable)

        response = self.comment(client, team["admin"], uuid4())

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to add comment"

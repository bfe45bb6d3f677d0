"""Tests for operations/account_roles.py."""

import pytest

from rosa_lifecycle.lib.errors import (
    AccountRolesInconsistentError,
    DecodeError,
    ExternalCallFailedError,
)
from rosa_lifecycle.lib.result import Err, Ok
from rosa_lifecycle.operations.account_roles import (
    ensure_account_roles,
    lookup_account_roles,
    release_account_roles,
)


class TestLookupAccountRoles:
    """Tests for lookup_account_roles."""

    def test_none_exist(self, ctx, rosa) -> None:
        rosa.respond("list", "account-roles", stdout=[])
        assert lookup_account_roles(ctx, "c1", "4.12") == Ok(None)

    def test_empty_output_means_none(self, ctx, rosa) -> None:
        rosa.respond("list", "account-roles", stdout="")
        assert lookup_account_roles(ctx, "c1", "4.12") == Ok(None)

    def test_complete_set(self, ctx, rosa, role_listing) -> None:
        rosa.respond("list", "account-roles", stdout=role_listing("c1", "4.12"))

        match lookup_account_roles(ctx, "c1", "4.12"):
            case Ok(roles):
                assert roles.installer.resource_name == "c1-HCP-ROSA-Installer-Role"
                assert roles.control_plane.resource_name == "c1-HCP-ROSA-ControlPlane-Role"
                assert roles.support.resource_name == "c1-HCP-ROSA-Support-Role"
                assert roles.worker.resource_name == "c1-HCP-ROSA-Worker-Role"
            case Err(e):
                pytest.fail(f"unexpected {e}")

    def test_ignores_other_prefixes_versions_and_types(self, ctx, rosa, role_listing) -> None:
        listing = [
            *role_listing("c1", "4.12"),
            *role_listing("other", "4.12"),
            *role_listing("c1", "4.11"),
            {
                "RoleName": "c1-HCP-ROSA-Extra-Role",
                "RoleType": "Operator",
                "Version": "4.12",
                "RoleARN": "arn:aws:iam::123456789012:role/c1-HCP-ROSA-Extra-Role",
            },
        ]
        rosa.respond("list", "account-roles", stdout=listing)

        match lookup_account_roles(ctx, "c1", "4.12"):
            case Ok(roles):
                assert roles is not None
                assert "c1-" in roles.worker
            case Err(e):
                pytest.fail(f"unexpected {e}")

    def test_version_match_is_exact(self, ctx, rosa, role_listing) -> None:
        rosa.respond("list", "account-roles", stdout=role_listing("c1", "4.1"))
        assert lookup_account_roles(ctx, "c1", "4.12") == Ok(None)

    @pytest.mark.parametrize("count", [1, 2, 3])
    def test_partial_set_is_inconsistent(self, ctx, rosa, role_listing, count: int) -> None:
        types = ["Control plane", "Installer", "Support", "Worker"][:count]
        rosa.respond("list", "account-roles", stdout=role_listing("c1", "4.12", types))

        match lookup_account_roles(ctx, "c1", "4.12"):
            case Err(AccountRolesInconsistentError(prefix, version, found)):
                assert prefix == "c1"
                assert version == "4.12"
                assert len(found) == count
            case other:
                pytest.fail(f"unexpected {other}")

    def test_duplicate_type_is_inconsistent(self, ctx, rosa, role_listing) -> None:
        listing = role_listing("c1", "4.12") + role_listing("c1", "4.12", ["Worker"])
        rosa.respond("list", "account-roles", stdout=listing)
        assert isinstance(lookup_account_roles(ctx, "c1", "4.12"), Err)

    def test_invalid_arn(self, ctx, rosa, role_listing) -> None:
        listing = role_listing("c1", "4.12")
        listing[0]["RoleARN"] = "not-an-arn"
        rosa.respond("list", "account-roles", stdout=listing)

        match lookup_account_roles(ctx, "c1", "4.12"):
            case Err(DecodeError()):
                pass
            case other:
                pytest.fail(f"unexpected {other}")

    def test_list_failure(self, ctx, rosa) -> None:
        rosa.respond("list", "account-roles", error=ExternalCallFailedError("rosa list", "denied"))
        assert lookup_account_roles(ctx, "c1", "4.12") == Err(
            ExternalCallFailedError("rosa list", "denied")
        )


class TestEnsureAccountRoles:
    """Tests for ensure_account_roles."""

    def test_existing_roles_are_reused(self, ctx, rosa, role_listing) -> None:
        rosa.respond("list", "account-roles", stdout=role_listing("c1", "4.12"))

        result = ensure_account_roles(ctx, "c1", "4.12", "stable")

        assert isinstance(result, Ok)
        assert rosa.calls_for("create", "account-roles") == []

    def test_is_idempotent(self, ctx, rosa, role_listing) -> None:
        rosa.respond("list", "account-roles", stdout=role_listing("c1", "4.12"))

        first = ensure_account_roles(ctx, "c1", "4.12", "stable")
        second = ensure_account_roles(ctx, "c1", "4.12", "stable")

        assert first == second
        assert rosa.calls_for("create", "account-roles") == []

    def test_creates_when_none_exist(self, ctx, rosa, role_listing) -> None:
        rosa.respond("list", "account-roles", stdout=[])
        rosa.respond("list", "account-roles", stdout=role_listing("c1", "4.12"))

        result = ensure_account_roles(ctx, "c1", "4.12", "stable")

        assert isinstance(result, Ok)
        assert rosa.commands == [
            ("list", "account-roles"),
            ("create", "account-roles"),
            ("list", "account-roles"),
        ]
        create_args = rosa.calls_for("create", "account-roles")[0]
        assert create_args[create_args.index("--prefix") + 1] == "c1"
        assert create_args[create_args.index("--version") + 1] == "4.12"
        assert create_args[create_args.index("--channel-group") + 1] == "stable"
        assert "--yes" in create_args

    def test_partial_set_is_not_repaired(self, ctx, rosa, role_listing) -> None:
        rosa.respond("list", "account-roles", stdout=role_listing("c1", "4.12", ["Installer"]))

        result = ensure_account_roles(ctx, "c1", "4.12", "stable")

        assert isinstance(result, Err)
        assert isinstance(result.error, AccountRolesInconsistentError)
        assert rosa.calls_for("create", "account-roles") == []

    def test_create_failure(self, ctx, rosa) -> None:
        rosa.respond("list", "account-roles", stdout=[])
        rosa.respond(
            "create", "account-roles", error=ExternalCallFailedError("rosa create account-roles", "quota")
        )

        match ensure_account_roles(ctx, "c1", "4.12", "stable"):
            case Err(ExternalCallFailedError(reason="quota")):
                pass
            case other:
                pytest.fail(f"unexpected {other}")

    def test_still_missing_after_create(self, ctx, rosa) -> None:
        rosa.respond("list", "account-roles", stdout=[])

        match ensure_account_roles(ctx, "c1", "4.12", "stable"):
            case Err(AccountRolesInconsistentError(found=())):
                pass
            case other:
                pytest.fail(f"unexpected {other}")


class TestReleaseAccountRoles:
    def test_deletes_by_prefix(self, ctx, rosa) -> None:
        assert release_account_roles(ctx, "c1") == Ok(None)
        args = rosa.calls_for("delete", "account-roles")[0]
        assert args[args.index("--prefix") + 1] == "c1"
        assert "--yes" in args

    def test_no_lookup(self, ctx, rosa) -> None:
        release_account_roles(ctx, "c1")
        assert rosa.commands == [("delete", "account-roles")]

    def test_failure(self, ctx, rosa) -> None:
        error = ExternalCallFailedError("rosa delete account-roles", "in use")
        rosa.respond("delete", "account-roles", error=error)
        assert release_account_roles(ctx, "c1") == Err(error)

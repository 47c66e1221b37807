"""Tests for chatbot.access - StaticAccessPolicy."""

import json

import pytest

from common.exceptions import UnauthorizedError
from chatbot.access import StaticAccessPolicy


@pytest.fixture
def policy():
    return StaticAccessPolicy(
        {
            "alice@walmart.com": "walmart_team",
            "Bob@Target.com": "target_team",
        }
    )


class TestResolve:
    def test_known_identity(self, policy):
        assert policy.resolve("alice@walmart.com") == "walmart_team"

    def test_case_and_whitespace_insensitive(self, policy):
        assert policy.resolve("  ALICE@walmart.com ") == "walmart_team"
        assert policy.resolve("bob@target.com") == "target_team"

    def test_unknown_identity_is_denied(self, policy):
        with pytest.raises(UnauthorizedError) as exc_info:
            policy.resolve("mallory@example.com")
        assert exc_info.value.identity == "mallory@example.com"

    def test_empty_identity_is_denied(self, policy):
        with pytest.raises(UnauthorizedError):
            policy.resolve("")

    def test_empty_table_denies_everyone(self):
        with pytest.raises(UnauthorizedError):
            StaticAccessPolicy().resolve("alice@walmart.com")

    def test_resolve_collection_alias(self, policy):
        assert policy.resolve_collection("alice@walmart.com") == "walmart_team"

    def test_membership(self, policy):
        assert "ALICE@walmart.com" in policy
        assert "eve@example.com" not in policy
        assert len(policy) == 2


class TestConstruction:
    def test_rejects_empty_collection(self):
        with pytest.raises(ValueError):
            StaticAccessPolicy({"alice@walmart.com": ""})

    def test_from_file(self, tmp_path):
        path = tmp_path / "access_map.json"
        path.write_text(json.dumps({"carol@costco.com": "costco_team"}), encoding="utf-8")
        assert StaticAccessPolicy.from_file(path).resolve("carol@costco.com") == "costco_team"

    def test_from_file_requires_object(self, tmp_path):
        path = tmp_path / "access_map.json"
        path.write_text(json.dumps(["carol@costco.com"]), encoding="utf-8")
        with pytest.raises(ValueError, match="JSON object"):
            StaticAccessPolicy.from_file(path)

    def test_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "map.json"
        path.write_text(json.dumps({"dave@example.com": "example_team"}), encoding="utf-8")
        monkeypatch.setenv("ACCESS_MAP_PATH", str(path))
        assert StaticAccessPolicy.from_env().resolve("dave@example.com") == "example_team"

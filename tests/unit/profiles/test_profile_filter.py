"""Unit tests for profile-based document filtering."""

import pytest

from springconf.profiles import parse_profile_tokens, should_use_document


class TestParseProfileTokens:
    """Tests for parse_profile_tokens function."""

    def test_splits_and_trims(self) -> None:
        assert parse_profile_tokens("dev, test ,!prod") == ["dev", "test", "!prod"]

    def test_drops_empty_tokens(self) -> None:
        assert parse_profile_tokens("dev,,test,") == ["dev", "test"]

    def test_accepts_list(self) -> None:
        assert parse_profile_tokens(["dev", "!prod"]) == ["dev", "!prod"]


class TestShouldUseDocument:
    """Tests for should_use_document function."""

    @pytest.mark.parametrize("active", [[], ["dev"], ["dev", "prod"], None])
    def test_document_without_profiles_always_used(self, active: list[str] | None) -> None:
        assert should_use_document({"a": 1}, active) is True

    def test_plain_match(self) -> None:
        assert should_use_document({"profiles": "dev,test"}, ["test"]) is True

    def test_negation_not_active(self) -> None:
        assert should_use_document({"profiles": "!prod"}, ["dev"]) is True

    def test_negation_active_excludes(self) -> None:
        assert should_use_document({"profiles": "!prod"}, ["prod"]) is False

    def test_negation_short_circuits_plain_match(self) -> None:
        """An active negated profile excludes even when a plain token matches."""
        assert should_use_document({"profiles": "prod,!prod"}, ["prod"]) is False
        assert should_use_document({"profiles": "dev,!prod"}, ["dev", "prod"]) is False

    def test_no_match_excluded(self) -> None:
        assert should_use_document({"profiles": "staging"}, ["dev"]) is False

    def test_empty_tokens_ignored(self) -> None:
        assert should_use_document({"profiles": ",,"}, ["dev"]) is False
        assert should_use_document({"profiles": "dev,"}, ["dev"]) is True

    def test_negated_only_with_no_active_profiles(self) -> None:
        """An inactive negated profile is satisfied even with no active profiles."""
        assert should_use_document({"profiles": "!prod"}, []) is True

    def test_bare_negation_ignored(self) -> None:
        assert should_use_document({"profiles": "!"}, ["dev"]) is False

    def test_negation_and_unmatched_plain_token(self) -> None:
        assert should_use_document({"profiles": "staging,!prod"}, ["dev"]) is True

    def test_empty_profiles_field_used(self) -> None:
        assert should_use_document({"profiles": ""}, ["dev"]) is True

    def test_non_mapping_documents_skipped(self) -> None:
        assert should_use_document(None, ["dev"]) is False
        assert should_use_document("scalar", ["dev"]) is False

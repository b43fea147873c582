"""
Tests for contributor notation parsing.

Run with: pytest tests/test_contributors.py -v
"""

from storpub_core.mapping.contributors import (
    affiliation_for_unit,
    contributor_key,
    merge_contributors,
    parse_contributor_entry,
    parse_contributors,
)
from storpub_core.model import Contributor, Unit
from storpub_core.model.units import ORGANIZATION_NAME


class TestParseContributors:
    """Tests for parse_contributors."""

    def test_full_entry(self):
        """All five fields are read."""
        people = parse_contributors("Murphy, Jane|editor|PBO|j@x.ie|https://orcid.org/0000-0001")
        assert len(people) == 1
        person = people[0]
        assert person.given == "Jane"
        assert person.family == "Murphy"
        assert person.role == "editor"
        assert person.email == "j@x.ie"
        assert person.orcid == "https://orcid.org/0000-0001"
        assert person.affiliation.org == ORGANIZATION_NAME
        assert person.affiliation.unit_code == "PBO"
        assert person.affiliation.unit == "Parliamentary Budget Office"
        assert person.affiliation.committee_code is None
        assert person.affiliation.country == "IE"

    def test_committee_token_overrides_fallback(self):
        """A COM- token selects the committees unit regardless of the fallback."""
        person = parse_contributors("Kelly, Tom|author|COM-FIN", "PBO")[0]
        assert person.affiliation.unit_code == "COM"
        assert person.affiliation.committee_code == "COM-FIN"
        assert person.affiliation.unit == "Committees"

    def test_committee_token_kept_as_written(self):
        person = parse_contributors("Ann Lee||com-fin")[0]
        assert person.affiliation.unit_code == "COM"
        assert person.affiliation.committee_code == "com-fin"

    def test_fallback_committee_for_plain_com(self):
        """Entries resolving to COM without a token use the fallback committee."""
        person = parse_contributors("Ann Lee||COM", None, "COM-HEALTH")[0]
        assert person.affiliation.committee_code == "COM-HEALTH"

    def test_fallback_committee_ignored_for_other_units(self):
        person = parse_contributors("Ann Lee||LIB", "COM", "COM-HEALTH")[0]
        assert person.affiliation.unit_code == "LIB"
        assert person.affiliation.committee_code is None

    def test_fallback_unit(self):
        person = parse_contributors("Ann Lee", "lib")[0]
        assert person.affiliation.unit_code == "LIB"

    def test_no_unit_anywhere(self):
        person = parse_contributors("Ann Lee")[0]
        assert person.affiliation.unit_code == "OTHER"
        assert person.affiliation.unit == "Other"

    def test_defaults(self):
        """Role defaults to author; roles are lower-cased."""
        people = parse_contributors("Ann Lee; Bob Ray|EDITOR")
        assert [p.role for p in people] == ["author", "editor"]

    def test_empty_input(self):
        assert parse_contributors(None) == []
        assert parse_contributors("") == []
        assert parse_contributors("   ") == []

    def test_nameless_entries_skipped(self):
        people = parse_contributors("|editor|PBO; Ann Lee;;")
        assert [p.family for p in people] == ["Lee"]

    def test_order_preserved(self):
        people = parse_contributors("Murphy, Jane; Kelly, Tom; Ann Lee")
        assert [p.family for p in people] == ["Murphy", "Kelly", "Lee"]

    def test_single_name(self):
        person = parse_contributor_entry("Murphy")
        assert person.given is None
        assert person.family == "Murphy"

    def test_extra_fields_ignored(self):
        person = parse_contributor_entry("Ann Lee|author|PBO|a@x.ie|0000|extra")
        assert person.orcid == "0000"


class TestMergeContributors:
    """Tests for merge_contributors."""

    def test_duplicates_skipped(self):
        """People already listed are not added again; first occurrence wins."""
        existing = [Contributor(given="Jane", family="Murphy", email="old@x.ie")]
        incoming = [
            Contributor(given=" jane ", family="MURPHY", email="new@x.ie"),
            Contributor(given="Tom", family="Kelly"),
        ]
        merged = merge_contributors(existing, incoming)
        assert [p.family for p in merged] == ["Murphy", "Kelly"]
        assert merged[0].email == "old@x.ie"

    def test_same_person_different_role_kept(self):
        existing = [Contributor(given="Jane", family="Murphy", role="author")]
        incoming = [Contributor(given="Jane", family="Murphy", role="editor")]
        assert len(merge_contributors(existing, incoming)) == 2

    def test_key(self):
        assert contributor_key(Contributor(given="Jane  Ann", family="Murphy")) == "jane ann|murphy|author"


class TestAffiliationForUnit:
    """Tests for affiliation_for_unit."""

    def test_committee_unit(self):
        affiliation = affiliation_for_unit(Unit(unit_code="COM", committee_code="COM-FIN"))
        assert affiliation.unit_code == "COM"
        assert affiliation.committee_code == "COM-FIN"

    def test_mapping_unit(self):
        assert affiliation_for_unit({"unitCode": "PBO"}).unit == "Parliamentary Budget Office"

    def test_no_unit(self):
        affiliation = affiliation_for_unit(None)
        assert affiliation.org == ORGANIZATION_NAME
        assert affiliation.unit_code is None

"""
Tests for mapping DOCX properties onto metadata.

Run with: pytest tests/test_docx_mapping.py -v
"""

from storpub_core.adapters.docx_properties import DocxProperties
from storpub_core.config import PipelineConfig
from storpub_core.mapping import apply_metadata_patch, map_docx_properties
from storpub_core.model import DocumentStatus, Metadata


def _props(core=None, custom=None):
    return {"core": core or {}, "custom": custom or {}}


class TestMapDocxProperties:
    """Tests for map_docx_properties."""

    def test_custom_beats_core_beats_current(self):
        """Precedence is custom property, core property, current record."""
        current = {"title": "Current", "subtitle": "Kept"}
        patch = map_docx_properties(_props({"title": "Core"}, {"Title": "Custom"}), current)
        assert patch["title"] == "Custom"
        patch = map_docx_properties(_props({"title": "Core"}), current)
        assert patch["title"] == "Core"
        patch = map_docx_properties(_props(), current)
        assert patch["title"] == "Current"
        assert patch["subtitle"] == "Kept"

    def test_untitled_fallback(self):
        assert map_docx_properties(_props())["title"] == "Untitled"

    def test_accepts_docx_properties(self):
        patch = map_docx_properties(DocxProperties(core={"title": "From object"}))
        assert patch["title"] == "From object"

    def test_status_normalized(self):
        patch = map_docx_properties(_props(custom={"Status": "In Review"}))
        assert patch["status"] == "in_review"

    def test_unknown_status_keeps_current(self):
        patch = map_docx_properties(_props(custom={"Status": "Whatever"}), {"status": "published"})
        assert patch["status"] == "published"

    def test_dates(self):
        patch = map_docx_properties(_props(
            {"dateCreated": "2025-01-01T00:00:00Z", "dateModified": "2025-02-01T00:00:00Z"},
            {"DatePublished": "2025-01-15T00:00:00Z"},
        ))
        assert patch["datePublished"] == "2025-01-15T00:00:00Z"
        assert patch["dateModified"] == "2025-02-01T00:00:00Z"

    def test_keywords_from_core(self):
        patch = map_docx_properties(_props({"keywords": ["budget", "tax"]}))
        assert patch["keywords"] == ["budget", "tax"]

    def test_language_stripped(self):
        assert map_docx_properties(_props(custom={"Language": " ga "}))["language"] == "ga"

    def test_committee_unit(self):
        """CommitteeCode only applies to the committees unit."""
        patch = map_docx_properties(_props(custom={"UnitCode": "com", "CommitteeCode": "COM-FIN"}))
        assert patch["unit"]["unitCode"] == "COM"
        assert patch["unit"]["committeeCode"] == "COM-FIN"
        patch = map_docx_properties(_props(custom={"UnitCode": "PBO", "CommitteeCode": "COM-FIN"}))
        assert "committeeCode" not in patch["unit"]

    def test_legacy_imprint_code(self):
        patch = map_docx_properties(_props(custom={"ImprintCode": "LIB"}))
        assert patch["unit"]["unitCode"] == "LIB"

    def test_current_unit_kept(self):
        patch = map_docx_properties(_props(), {"unit": {"unitCode": "PBO"}})
        assert patch["unit"]["unitCode"] == "PBO"

    def test_contributors_use_unit_fallback(self):
        patch = map_docx_properties(_props(custom={
            "UnitCode": "PBO",
            "Contributors": "Murphy, Jane; Kelly, Tom|editor|COM-FIN",
        }))
        people = patch["contributors"]
        assert [p["family"] for p in people] == ["Murphy", "Kelly"]
        assert people[0]["affiliation"]["unitCode"] == "PBO"
        assert people[1]["affiliation"]["committeeCode"] == "COM-FIN"

    def test_legacy_authors_property(self):
        patch = map_docx_properties(_props(custom={"Authors": "Ann Lee"}))
        assert patch["contributors"][0]["family"] == "Lee"

    def test_creator_becomes_single_author(self):
        """Without contributor properties the core creator is the author."""
        patch = map_docx_properties(_props({"creator": "Jane Murphy"}, {"UnitCode": "LIB"}))
        assert len(patch["contributors"]) == 1
        person = patch["contributors"][0]
        assert person["given"] == "Jane"
        assert person["role"] == "author"
        assert person["affiliation"]["unitCode"] == "LIB"

    def test_contributors_merged_with_current(self):
        current = {"contributors": [{"given": "Jane", "family": "Murphy", "email": "jane@x.ie"}]}
        patch = map_docx_properties(_props(custom={"Contributors": "Murphy, Jane; Ann Lee"}), current)
        people = patch["contributors"]
        assert [p["family"] for p in people] == ["Murphy", "Lee"]
        assert people[0]["email"] == "jane@x.ie"

    def test_publisher_from_config(self):
        config = PipelineConfig()
        config.organization.name = "Test House"
        assert map_docx_properties(_props(), config=config)["publisher"] == "Test House"

    def test_no_none_values(self):
        patch = map_docx_properties(_props())
        assert None not in patch.values()


class TestApplyMetadataPatch:
    """Tests for apply_metadata_patch."""

    def test_returns_new_record(self):
        """The current record is not modified."""
        current = Metadata(title="Old", version="1.0")
        merged = apply_metadata_patch(current, {"title": "New"})
        assert merged.title == "New"
        assert merged.version == "1.0"
        assert current.title == "Old"

    def test_full_import_patch(self):
        patch = map_docx_properties(_props(
            {"title": "Budget Outlook", "creator": "Jane Murphy"},
            {"Status": "published", "UnitCode": "PBO", "Keywords": ["budget"]},
        ))
        merged = apply_metadata_patch(None, patch)
        assert merged.status == DocumentStatus.PUBLISHED
        assert merged.unit.unit == "Parliamentary Budget Office"
        assert merged.contributors[0].family == "Murphy"

    def test_invalid_field_merged_leniently(self):
        """An invalid field is dropped instead of failing the import."""
        merged = apply_metadata_patch({"title": "Old"}, {"title": "New", "status": "bogus"})
        assert merged.title == "New"
        assert merged.status == DocumentStatus.DRAFT

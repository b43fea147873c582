"""
Tests for escaping, slugs and id helpers.

Run with: pytest tests/test_xml_utils.py -v
"""

from lxml import etree

from storpub_core.xml.utils import (
    escape_xml,
    first_by_local_name,
    local_name,
    make_unique_id_factory,
    slugify,
    strip_markup,
    xml_comment,
)


class TestEscapeXml:
    """Tests for escape_xml."""

    def test_escapes_all_five_characters(self):
        """All XML special characters should become entities."""
        assert escape_xml("a & b < c > d \" e ' f") == "a &amp; b &lt; c &gt; d &quot; e &apos; f"

    def test_none_is_empty(self):
        """None should render as an empty string."""
        assert escape_xml(None) == ""

    def test_non_string_values(self):
        """Numbers should be converted to text."""
        assert escape_xml(42) == "42"

    def test_escaped_text_reparses_identically(self):
        """Escaped text inside an element and an attribute should parse back unchanged."""
        raw = "Fish & \"Chips\" <fried> 'today'"
        root = etree.fromstring(f'<r a="{escape_xml(raw)}">{escape_xml(raw)}</r>')
        assert root.text == raw
        assert root.get("a") == raw


class TestXmlComment:
    """Tests for comment building."""

    def test_double_hyphen_is_broken_up(self):
        """Comments must not contain -- or end with -."""
        comment = xml_comment("unsupported node: a--b-")
        body = comment[len("<!--"):-len("-->")]
        assert "--" not in body
        etree.fromstring(f"<r>{comment}</r>")

    def test_markup_in_message_is_escaped(self):
        """Angle brackets in the message should not leak into the comment."""
        assert "<b>" not in xml_comment("bad <b> node")


class TestStripMarkup:
    """Tests for strip_markup."""

    def test_removes_tags_and_entities(self):
        """Tags are dropped and entities decoded."""
        assert strip_markup('<emphasis role="strong">Fish &amp; Chips</emphasis>') == "Fish & Chips"

    def test_empty(self):
        assert strip_markup("") == ""


class TestSlugify:
    """Tests for slugify."""

    def test_basic_title(self):
        """Diacritics stripped, punctuation collapsed, lower-cased."""
        assert slugify("Budget 2025: Éire's Outlook") == "budget-2025-eire-s-outlook"

    def test_truncates_without_trailing_hyphen(self):
        """Truncated slugs must not end with a hyphen."""
        slug = slugify("aaaa bbbb", max_length=5)
        assert slug == "aaaa"

    def test_only_punctuation_gives_empty_slug(self):
        assert slugify("!!! ---") == ""

    def test_none(self):
        assert slugify(None) == ""


class TestUniqueIds:
    """Tests for the unique id factory."""

    def test_repeated_bases_get_suffixes(self):
        """Repeats get -2, -3, ..."""
        unique = make_unique_id_factory()
        assert [unique("intro"), unique("intro"), unique("intro")] == ["intro", "intro-2", "intro-3"]

    def test_empty_base_becomes_section(self):
        unique = make_unique_id_factory()
        assert unique("") == "section"
        assert unique("") == "section-2"

    def test_suffix_skips_taken_ids(self):
        """A literal 'intro-2' heading must not be handed out twice."""
        unique = make_unique_id_factory()
        ids = [unique("intro-2"), unique("intro"), unique("intro")]
        assert len(set(ids)) == 3


class TestLxmlHelpers:
    """Tests for namespace-agnostic lookups."""

    def test_local_name_strips_namespace(self):
        root = etree.fromstring('<a:r xmlns:a="urn:x"><a:title>T</a:title></a:r>')
        assert local_name(root) == "r"
        assert first_by_local_name(root, "title").text == "T"

    def test_local_name_of_comment_is_empty(self):
        root = etree.fromstring("<r><!-- c --></r>")
        assert local_name(root[0]) == ""

    def test_first_by_local_name_missing(self):
        root = etree.fromstring("<r/>")
        assert first_by_local_name(root, "title") is None

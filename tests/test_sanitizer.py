"""Tests for the content sanitizer.

Every sanitized text must keep the input's length and newline offsets, so
positions computed on it stay valid on the original.
"""

import pytest

from mapperbridge.indexer.extractors.java import extract_methods, extract_package_name
from mapperbridge.indexer.extractors.xml import extract_statements
from mapperbridge.indexer.sanitizer import sanitize, sanitize_java_content, sanitize_xml_content
from tests.conftest import USER_MAPPER_JAVA, USER_MAPPER_XML, USER_SERVICE_JAVA

JAVA_SAMPLES = [
    USER_MAPPER_JAVA,
    USER_SERVICE_JAVA,
    'String s = "a\\"b"; char c = \'\\\'\';',
    "a /* never closed\nstill open",
    'x = "unterminated\ny = 1;',
    'x = "ends with backslash \\\ny = 2;',
    'String q = """\n  SELECT 1\n  """;',
    "// trailing comment without newline",
    "int a;\r\n// windows line\r\nint b;\r\n",
    "",
]

XML_SAMPLES = [
    USER_MAPPER_XML,
    "<a><!-- <select id=\"x\"> --></a>",
    "<a><![CDATA[ <select id=\"y\">\n ]]></a>",
    "<a><!-- never closed\n<select id=\"z\">",
]


def _newline_offsets(text):
    return [i for i, ch in enumerate(text) if ch == "\n"]


class TestInvariants:
    """Length and newline geometry is preserved for every input."""

    @pytest.mark.parametrize("text", JAVA_SAMPLES)
    def test_java_length_and_newlines(self, text):
        result = sanitize_java_content(text)
        assert len(result) == len(text)
        assert _newline_offsets(result) == _newline_offsets(text)

    @pytest.mark.parametrize("text", XML_SAMPLES)
    def test_xml_length_and_newlines(self, text):
        result = sanitize_xml_content(text)
        assert len(result) == len(text)
        assert _newline_offsets(result) == _newline_offsets(text)

    def test_plain_code_is_unchanged(self):
        code = "package a.b;\n\npublic interface M {\n    int count();\n}\n"
        assert sanitize_java_content(code) == code
        xml = '<mapper namespace="a.b.M">\n  <select id="count">SELECT 1</select>\n</mapper>\n'
        assert sanitize_xml_content(xml) == xml

    @pytest.mark.parametrize("text", JAVA_SAMPLES)
    def test_java_sanitizing_twice_changes_nothing(self, text):
        once = sanitize_java_content(text)
        assert sanitize_java_content(once) == once


class TestJavaSpans:
    def test_block_comment_body_blanked(self):
        assert sanitize_java_content("a /* x */ b") == "a /*   */ b"

    def test_line_comment_runs_to_end_of_line(self):
        assert sanitize_java_content("int a; // hi\nint b;") == "int a; //   \nint b;"

    def test_string_with_escaped_quote(self):
        assert sanitize_java_content('String s = "a\\"b";') == 'String s = "    ";'

    def test_char_literal_with_escape(self):
        assert sanitize_java_content("char c = '\\'';") == "char c = '  ';"

    def test_unterminated_block_comment_blanked_to_end(self):
        text = "a /* never closed\nstill"
        assert sanitize_java_content(text) == "a /*" + " " * len(" never closed") + "\n" + " " * 5

    def test_unterminated_string_closed_by_newline(self):
        assert sanitize_java_content('x = "abc\ny = 1;') == 'x = "   \ny = 1;'

    def test_text_block_body_blanked(self):
        text = 'String q = """\n  SELECT 1\n  """;'
        assert sanitize_java_content(text) == 'String q = """\n' + " " * 10 + '\n  """;'

    def test_carriage_returns_kept_inside_comments(self):
        assert sanitize_java_content("/* a\r\nb */") == "/*  \r\n  */"


class TestXmlSpans:
    def test_comment_body_blanked(self):
        text = '<a><!-- <select id="x"> --></a>'
        assert sanitize_xml_content(text) == "<a><!--" + " " * len(' <select id="x"> ') + "--></a>"

    def test_cdata_body_blanked(self):
        assert sanitize_xml_content("<a><![CDATA[a < b]]></a>") == "<a><![CDATA[     ]]></a>"

    def test_attribute_values_are_kept(self):
        text = '<mapper namespace="a.b.C">'
        assert sanitize_xml_content(text) == text


class TestDispatch:
    def test_sanitize_dispatches_by_language(self):
        assert sanitize("// x", "java") == "//  "
        assert sanitize("<!--x-->", "xml") == "<!-- -->"

    def test_unknown_language_rejected(self):
        with pytest.raises(ValueError):
            sanitize("text", "kotlin")


class TestOpacity:
    """Text inside comments, strings and CDATA is invisible to the extractors."""

    def test_method_in_comment_not_found(self):
        text = "interface M {\n    // User hidden();\n    /* User alsoHidden(); */\n}\n"
        assert extract_methods(sanitize_java_content(text)) == []

    def test_package_in_string_not_found(self):
        text = 'String s = "package com.fake;";\n'
        assert extract_package_name(sanitize_java_content(text)) is None

    def test_statement_in_cdata_not_found(self):
        ids = [s.id for s in extract_statements(sanitize_xml_content(USER_MAPPER_XML))]
        assert "fake" not in ids
        assert "commented" not in ids

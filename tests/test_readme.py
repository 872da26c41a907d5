"""Tests for the README extractor."""

from portfolio_sync.readme import (
    extract_first_paragraph,
    extract_section,
    find_readme,
    first_sentence,
    parse_readme,
)


class TestParseReadme:
    def test_skips_title_and_badges(self):
        content = "# Title\n\n![badge](url)\n\nThis project does X. It also does Y.\n\nMore text."
        result = parse_readme(content)
        assert result.short_description == "This project does X."
        assert result.description == "This project does X. It also does Y."

    def test_prefers_about_section(self):
        content = (
            "# Tool\n\nIntro paragraph.\n\n## About\n\nThe real story.\nSecond line.\n\n"
            "## Install\n\npip install tool\n"
        )
        result = parse_readme(content)
        assert result.description == "The real story. Second line."
        assert result.short_description == "The real story."

    def test_empty_or_missing(self):
        assert parse_readme(None).description is None
        assert parse_readme("").short_description is None

    def test_only_headings_and_badges(self):
        result = parse_readme("# Title\n[![CI](x)](y)\n<p align='center'>\n## Usage\n")
        assert result.description is None
        assert result.short_description is None


class TestFirstParagraph:
    def test_stops_at_blank_line(self):
        assert extract_first_paragraph("# T\nline one\nline two\n\nnext para") == "line one line two"

    def test_caps_at_three_lines(self):
        content = "# T\na\nb\nc\nd\n"
        assert extract_first_paragraph(content) == "a b c"

    def test_skips_html_but_not_anchor(self):
        content = '# T\n<img src="logo.png">\n<a href="x">link</a> text\n'
        assert extract_first_paragraph(content) == '<a href="x">link</a> text'

    def test_no_title(self):
        assert extract_first_paragraph("Just text here.\n\nMore.") == "Just text here."


class TestSection:
    def test_case_insensitive_heading(self):
        assert extract_section("# X\n## OVERVIEW\nHello.\n# Next\nNo.") == "Hello."

    def test_missing_section(self):
        assert extract_section("# X\nHello.") is None


class TestFirstSentence:
    def test_question_mark(self):
        assert first_sentence("Why this? Because.") == "Why this?"

    def test_no_terminator(self):
        assert first_sentence("no punctuation at all") == "no punctuation at all"

    def test_truncates_long_sentence(self):
        sentence = "a" * 200 + "."
        short = first_sentence(sentence)
        assert len(short) == 120
        assert short.endswith("...")


class TestFindReadme:
    def test_prefers_canonical_name(self):
        assert find_readme(["src/README.md", "readme.md", "README.md"]) == "README.md"

    def test_case_insensitive_fallback(self):
        assert find_readme(["ReadMe.MD", "main.py"]) == "ReadMe.MD"

    def test_ignores_nested(self):
        assert find_readme(["docs/README.md"]) is None

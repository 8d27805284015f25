"""Tests for glob compilation and pattern resolution."""

import pytest

from build_janitor.errors import ConfigurationError, PatternSyntaxError
from build_janitor.patterns import PatternResolver, compile_glob, resolve
from build_janitor.utils.paths import CaseInsensitiveNormalizer

from tests.helpers.files import write_files


@pytest.fixture
def output_tree(dist):
    """Create a typical build output tree."""
    write_files(
        dist,
        "a.js",
        "b.js",
        "keep.txt",
        ".hidden",
        "sub/c.js",
        "sub/d.css",
        "static/logo.png",
    )
    return dist


class TestCompileGlob:
    """Tests for compile_glob."""

    def test_literal_pattern(self, tmp_path):
        """Test a pattern without magic compiles to a literal root."""
        pattern = compile_glob("sub/c.js", str(tmp_path))

        assert pattern.literal
        assert pattern.root == str(tmp_path / "sub" / "c.js")

    def test_magic_pattern_root_is_literal_prefix(self, tmp_path):
        """Test the walk root stops at the first magic segment."""
        pattern = compile_glob("sub/**/*.js", str(tmp_path))

        assert not pattern.literal
        assert pattern.root == str(tmp_path / "sub")
        assert pattern.pattern == "**/*.js"

    def test_negation_and_directory_marker(self, tmp_path):
        pattern = compile_glob("!build/", str(tmp_path))

        assert pattern.negated
        assert pattern.dir_only
        assert pattern.root == str(tmp_path / "build")

    def test_absolute_pattern_ignores_base(self, tmp_path):
        """Test absolute patterns keep their own root."""
        pattern = compile_glob(str(tmp_path / "other" / "*.js"), "/somewhere/else")

        assert pattern.root == str(tmp_path / "other")

    @pytest.mark.parametrize(
        "pattern,reason",
        [
            ("", "empty pattern"),
            ("!", "negation without a pattern"),
            ("[abc", "unterminated character class"),
            ("{a,b", "unbalanced brace"),
            ("*.js\\", "trailing escape character"),
        ],
    )
    def test_invalid_patterns(self, tmp_path, pattern, reason):
        """Test malformed patterns raise PatternSyntaxError."""
        with pytest.raises(PatternSyntaxError) as exc_info:
            compile_glob(pattern, str(tmp_path))

        assert exc_info.value.reason == reason

    def test_pattern_error_is_configuration_error(self, tmp_path):
        with pytest.raises(ConfigurationError):
            compile_glob("[", str(tmp_path))


class TestPatternResolver:
    """Tests for PatternResolver.resolve."""

    def test_empty_patterns_resolve_to_nothing(self, output_tree):
        """Test there is no implicit 'clean everything'."""
        assert resolve([], output_tree) == []

    def test_double_star_matches_everything(self, output_tree):
        """Test '**' matches files, directories and dotfiles."""
        result = resolve(["**"], output_tree)

        assert result == [
            ".hidden",
            "a.js",
            "b.js",
            "keep.txt",
            "static",
            "static/logo.png",
            "sub",
            "sub/c.js",
            "sub/d.css",
        ]

    def test_negation_subtracts_previous_matches(self, output_tree):
        """Test '!keep.txt' removes keep.txt even though '**' matched it."""
        result = resolve(["**", "!keep.txt"], output_tree)

        assert "keep.txt" not in result
        assert "a.js" in result

    def test_negation_does_not_block_later_matches(self, output_tree):
        """Test negation is a subtraction pass, not a filter on later patterns."""
        result = resolve(["!a.js", "*.js"], output_tree)

        assert result == ["a.js", "b.js"]

    def test_negated_child_shields_parent_directory(self, output_tree):
        """Test a kept file keeps its parent directory out of the result."""
        result = resolve(["**/*", "!sub/c.js"], output_tree)

        assert "sub" not in result
        assert "sub/c.js" not in result
        assert "sub/d.css" in result

    def test_negated_directory_glob(self, output_tree):
        result = resolve(["**/*", "!static/**"], output_tree)

        assert "static" not in result
        assert "static/logo.png" not in result
        assert "sub" in result

    def test_protect_is_applied_last(self, output_tree):
        """Test protected paths never appear, whatever the patterns say."""
        result = resolve(["**/*", "!nothing", "a.js"], output_tree, protect=["a.js", "sub/c.js"])

        assert "a.js" not in result
        assert "sub/c.js" not in result
        assert "sub" not in result
        assert "b.js" in result

    def test_results_sorted_and_unique(self, output_tree):
        """Test overlapping patterns yield each path once."""
        result = resolve(["*.js", "a.js", "{a,b}.js"], output_tree)

        assert result == ["a.js", "b.js"]

    def test_recursive_extension_match(self, output_tree):
        assert resolve(["**/*.js"], output_tree) == ["a.js", "b.js", "sub/c.js"]

    def test_character_class(self, output_tree):
        assert resolve(["[!a].js"], output_tree) == ["b.js"]

    def test_directory_only_pattern(self, output_tree):
        """Test a trailing slash only matches directories."""
        assert resolve(["*/"], output_tree) == ["static", "sub"]

    def test_question_mark(self, output_tree):
        assert resolve(["?.js"], output_tree) == ["a.js", "b.js"]

    def test_escaped_bracket_in_class(self, dist):
        """Test an escaped ']' inside a class matches a literal bracket."""
        write_files(dist, "a]", "ab")

        assert resolve([r"a[\]]"], dist) == ["a]"]

    def test_escaped_magic_is_literal(self, dist):
        write_files(dist, "chunk[1].js", "chunk1.js")

        assert resolve([r"chunk\[1\].js"], dist) == ["chunk[1].js"]

    def test_nested_braces(self, output_tree):
        """Test alternation expands across segments and nests."""
        assert resolve(["{a,sub/{c,d}}.{js,css}"], output_tree) == ["a.js", "sub/c.js", "sub/d.css"]

    def test_globstar_excludes_its_root(self, output_tree):
        """Test 'sub/**' yields the contents of sub, not sub itself."""
        assert resolve(["sub/**"], output_tree) == ["sub/c.js", "sub/d.css"]

    def test_missing_literal_resolves_to_nothing(self, output_tree):
        assert resolve(["missing.js"], output_tree) == []

    def test_parent_relative_pattern(self, output_tree, tmp_path):
        """Test patterns may reach outside the base directory."""
        write_files(tmp_path, "coverage/lcov.info")

        assert resolve(["../coverage/*"], output_tree) == ["../coverage/lcov.info"]

    def test_missing_base_dir(self, tmp_path):
        assert resolve(["**/*"], tmp_path / "missing") == []

    def test_syntax_error_raised_before_matching(self, output_tree):
        """Test an invalid later pattern fails the whole resolution."""
        with pytest.raises(PatternSyntaxError):
            resolve(["**/*", "!{broken"], output_tree)

    def test_case_insensitive_matching(self, output_tree):
        """Test the normalizer's case rule reaches the regex."""
        resolver = PatternResolver(CaseInsensitiveNormalizer())

        assert resolver.resolve(["*.JS"], output_tree) == ["a.js", "b.js"]


class TestResolveLiterals:
    """Tests for PatternResolver.resolve_literals."""

    def test_glob_characters_are_literal(self, dist):
        """Test asset names are never interpreted as patterns."""
        resolver = PatternResolver()

        result = resolver.resolve_literals(["chunk[1].js", "b.js", "b.js"], dist)

        assert result == ["b.js", "chunk[1].js"]

    def test_protect_applies_to_literals(self, dist):
        resolver = PatternResolver()

        assert resolver.resolve_literals(["a.js", "b.js"], dist, protect=["a.js"]) == ["b.js"]

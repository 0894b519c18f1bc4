"""Pytest configuration and shared fixtures for the google-fonts-downloader test suite."""

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests that require external services (network)"
    )


# ---------------------------------------------------------------------------
# Sample stylesheet fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def minimal_css():
    """Single latin rule, the smallest stylesheet the service emits."""
    return (
        "/* latin */\n"
        "@font-face {\n"
        "  font-family: 'Foo';\n"
        "  font-style: normal;\n"
        "  font-weight: 400;\n"
        "  font-display: swap;\n"
        "  src: url(https://x/y.woff2) format('woff2');\n"
        "}"
    )


@pytest.fixture
def google_fonts_css():
    """Browser-flavoured css2 response: subset comments, woff2 sources, one stretch axis."""
    return """\
/* cyrillic-ext */
@font-face {
  font-family: 'Open Sans';
  font-style: italic;
  font-weight: 700;
  font-stretch: 100%;
  font-display: swap;
  src: url(https://fonts.gstatic.com/s/opensans/v40/memtYaGs126MiZpBA-UFUIcVXSCEkx2cmqvXlWqWtE6F15M.woff2) format('woff2');
  unicode-range: U+0460-052F, U+1C80-1C88, U+20B4, U+2DE0-2DFF, U+A640-A69F, U+FE2E-FE2F;
}
/* latin */
@font-face {
  font-family: 'Creepster';
  font-style: normal;
  font-weight: 400;
  font-display: swap;
  src: url(https://fonts.gstatic.com/s/creepster/v13/AlZy_zVUqJz4yMrniH4Rcn35fh4Dog.woff2) format('woff2');
  unicode-range: U+0000-00FF, U+0131, U+0152-0153, U+02BB-02BC, U+02C6, U+02DA, U+02DC, U+0304, U+0308, U+0329, U+2000-206F, U+20AC, U+2122, U+2191, U+2193, U+2212, U+2215, U+FEFF, U+FFFD;
}
/* latin */
@font-face {
  font-family: 'Gravitas One';
  font-style: normal;
  font-weight: 400;
  font-display: swap;
  src: url(https://fonts.gstatic.com/s/gravitasone/v19/5h1diZ4hJ3cblKy3LWakKQmqCm5MjXPjbA.woff2) format('woff2');
  unicode-range: U+0000-00FF, U+0131, U+0152-0153, U+02BB-02BC, U+02C6, U+02DA, U+02DC, U+0304, U+0308, U+0329, U+2000-206F, U+20AC, U+2122, U+2191, U+2193, U+2212, U+2215, U+FEFF, U+FFFD;
}
"""


@pytest.fixture
def plain_css():
    """What the service returns to non-browser clients: no comments, truetype sources."""
    return """\
@font-face {
  font-family: 'Creepster';
  font-style: normal;
  font-weight: 400;
  font-display: swap;
  src: url(https://fonts.gstatic.com/s/creepster/v13/AlZy_zVUqJz4yMrniH4Rcn35fh4.ttf) format('truetype');
}
@font-face {
  font-family: 'Gravitas One';
  font-style: normal;
  font-weight: 400;
  font-display: swap;
  src: url(https://fonts.gstatic.com/s/gravitasone/v19/5h1diZ4hJ3cblKy3LWakKQmqCm5MjXPjbA.ttf) format('truetype');
}
"""


@pytest.fixture
def trailing_rules_css():
    """One comment followed by two rules; both belong to the comment's subset."""
    return """\
/* greek */
@font-face {
  font-family: 'Foo';
  font-style: normal;
  font-weight: 400;
  font-display: swap;
  src: url(https://x/foo-greek-400.woff2) format('woff2');
}
@font-face {
  font-family: 'Foo';
  font-style: normal;
  font-weight: 700;
  font-display: swap;
  src: url(https://x/foo-greek-700.woff2) format('woff2');
}
"""


@pytest.fixture
def unlabeled_then_labeled_css():
    """A rule before the first comment, then a labeled rule."""
    return """\
@font-face {
  font-family: 'Foo';
  font-style: normal;
  font-weight: 300;
  font-display: swap;
  src: url(https://x/foo-300.woff2) format('woff2');
}
/* vietnamese */
@font-face {
  font-family: 'Foo';
  font-style: normal;
  font-weight: 400;
  font-display: swap;
  src: url(https://x/foo-vi-400.woff2) format('woff2');
}
"""


def make_rule(family="Foo", style="normal", weight="400", stretch=None, display="swap",
              src="url(https://x/y.woff2) format('woff2')", omit=()):
    """Build an @font-face rule, leaving out any property named in omit."""
    lines = [
        ("font-family", f"'{family}'"),
        ("font-style", style),
        ("font-weight", weight),
        ("font-stretch", stretch),
        ("font-display", display),
        ("src", src),
    ]
    body = "".join(
        f"  {name}: {value};\n"
        for name, value in lines
        if value is not None and name not in omit
    )
    return "@font-face {\n" + body + "}"


@pytest.fixture
def rule_factory():
    return make_rule

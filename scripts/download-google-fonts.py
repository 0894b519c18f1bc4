#!/usr/bin/env python3
"""
Download Google Fonts for self-hosting.

Fetches a Google Fonts stylesheet, splits it into its per-subset @font-face
rules, downloads every referenced font file and writes, next to each one, a
small CSS file whose src points at the local copy.

Usage:
    python scripts/download-google-fonts.py \\
        "https://fonts.googleapis.com/css2?family=Inter:wght@400;700&display=swap" \\
        --output ./public/fonts --fonts-prefix /fonts

Output (one pair per @font-face rule):
    inter-400-normal-latin.woff2
    inter-400-normal-latin.css

Existing files are left alone unless --overwrite is given, so re-running the
script over the same stylesheet is idempotent.

Requirements:
    pip install requests
"""

import argparse
import re
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

try:
    import requests
except ImportError:
    print("Error: requests is required. Install with: pip install requests")
    sys.exit(1)


# Google Fonts serves a stripped-down stylesheet (no subset comments, ttf
# sources) to clients that don't look like a modern browser.
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_TIMEOUT = 30
DEFAULT_OUTPUT_DIR = "./fonts"
DEFAULT_FONTS_PREFIX = "./"

FILENAME_STYLES = ("subset", "family")

# Family names and subset labels come from the fetched stylesheet and end up
# in output paths.
UNSAFE_FILENAME_CHARS = ("/", "\\", "\0")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class FontDownloadError(Exception):
    """Base class for errors that abort a download run."""


class FontFaceParseError(FontDownloadError):
    """A stylesheet segment could not be decoded into a font face."""


class UnsupportedFontFormatError(FontDownloadError):
    """A font face declares a format we have no file extension for."""


class FontWriteError(FontDownloadError):
    """Writing a font or CSS file to disk failed."""


class UnsafeFilenameError(FontDownloadError):
    """A derived filename would not stay inside the output directory."""


class FilenameCollisionError(FontDownloadError):
    """Two font faces in one stylesheet derive the same filename."""


# ---------------------------------------------------------------------------
# Font-face records
# ---------------------------------------------------------------------------

class FontFormat(str, Enum):
    TRUETYPE = "truetype"
    WOFF = "woff"
    WOFF2 = "woff2"
    UNKNOWN = "unknown"

    @classmethod
    def from_token(cls, token: str) -> "FontFormat":
        """Map a format('...') token to a FontFormat, ignoring case."""
        try:
            return cls(token.strip().lower())
        except ValueError:
            return cls.UNKNOWN

    @property
    def extension(self) -> str | None:
        return FONT_EXTENSIONS.get(self)


FONT_EXTENSIONS = {
    FontFormat.TRUETYPE: "ttf",
    FontFormat.WOFF: "woff",
    FontFormat.WOFF2: "woff2",
}


@dataclass(frozen=True)
class FontFace:
    """One decoded @font-face rule and the subset it was declared for."""

    family: str
    style: str
    weight: str
    stretch: str | None
    display: str
    subset: str
    url: str
    format: FontFormat
    css: str


@dataclass(frozen=True)
class CssBlock:
    """Stylesheet text attributed to a single subset comment."""

    css: str
    subset: str


# ---------------------------------------------------------------------------
# Stylesheet splitting
# ---------------------------------------------------------------------------

COMMENT_RE = re.compile(r"/\*(.*?)\*/", re.DOTALL)
FONT_FACE_RE = re.compile(r"@font-face\s*\{[^}]*\}")
SRC_URL_RE = re.compile(r"url\(\s*(['\"]?)(.*?)\1\s*\)")
SRC_FORMAT_RE = re.compile(r"format\(\s*(['\"]?)(.*?)\1\s*\)")

# Declaration order the service always emits. font-stretch only appears for
# families with width axes.
PROPERTY_ORDER = (
    "font-family",
    "font-style",
    "font-weight",
    "font-stretch",
    "font-display",
    "src",
)
OPTIONAL_PROPERTIES = {"font-stretch"}

PROPERTY_PATTERNS = {
    name: re.compile(r"(?<![\w-])" + re.escape(name) + r"\s*:\s*([^;]*);")
    for name in PROPERTY_ORDER
}


def _describe_subset(subset: str) -> str:
    return f"'{subset}'" if subset else "unlabeled"


def _excerpt(text: str, limit: int = 80) -> str:
    text = re.sub(r"\s+", " ", text).strip()
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        return value[1:-1]
    return value


def _append_block(blocks: list[CssBlock], text: str, subset: str) -> None:
    text = text.strip()
    if not text:
        return
    if "/*" in text or "*/" in text:
        raise FontFaceParseError(
            f"Unterminated comment in {_describe_subset(subset)} block: {_excerpt(text)!r}"
        )
    blocks.append(CssBlock(css=text, subset=subset))


def split_css_into_blocks(css: str) -> list[CssBlock]:
    """Cut a stylesheet at its comments.

    Each comment's text labels the CSS that follows it, up to the next
    comment or the end of the document. Text before the first comment (or
    the whole document, when there are no comments) gets an empty label.
    """
    blocks: list[CssBlock] = []
    subset = ""
    pos = 0
    for match in COMMENT_RE.finditer(css):
        _append_block(blocks, css[pos:match.start()], subset)
        subset = match.group(1).strip()
        pos = match.end()
    _append_block(blocks, css[pos:], subset)
    return blocks


def _find_property(rule: str, name: str, subset: str) -> tuple[str, int] | None:
    """Return (value, offset) for a declaration, or None when it's optional and absent."""
    match = PROPERTY_PATTERNS[name].search(rule)
    if match is None:
        if name in OPTIONAL_PROPERTIES:
            return None
        raise FontFaceParseError(
            f"Missing '{name}' in {_describe_subset(subset)} @font-face rule: {_excerpt(rule)!r}"
        )
    value = match.group(1).strip()
    if not value:
        raise FontFaceParseError(
            f"Empty '{name}' in {_describe_subset(subset)} @font-face rule: {_excerpt(rule)!r}"
        )
    return value, match.start()


def parse_font_face(rule: str, subset: str = "") -> FontFace:
    """Decode a single ``@font-face { ... }`` rule.

    Raises FontFaceParseError when a required declaration is missing, empty
    or out of order, or when src lacks a url() or format().
    """
    rule = rule.strip()
    values = {}
    last_name, last_offset = None, -1
    for name in PROPERTY_ORDER:
        found = _find_property(rule, name, subset)
        if found is None:
            values[name] = None
            continue
        value, offset = found
        if offset < last_offset:
            raise FontFaceParseError(
                f"'{name}' declared before '{last_name}' in {_describe_subset(subset)} "
                f"@font-face rule: {_excerpt(rule)!r}"
            )
        values[name] = value
        last_name, last_offset = name, offset

    src = values["src"]
    url_match = SRC_URL_RE.search(src)
    if url_match is None or not url_match.group(2).strip():
        raise FontFaceParseError(
            f"No url() in src of {_describe_subset(subset)} @font-face rule: {_excerpt(rule)!r}"
        )
    format_match = SRC_FORMAT_RE.search(src)
    if format_match is None or not format_match.group(2).strip():
        raise FontFaceParseError(
            f"No format() in src of {_describe_subset(subset)} @font-face rule: {_excerpt(rule)!r}"
        )

    return FontFace(
        family=_unquote(values["font-family"]),
        style=values["font-style"],
        weight=values["font-weight"],
        stretch=values["font-stretch"],
        display=values["font-display"],
        subset=subset,
        url=url_match.group(2).strip(),
        format=FontFormat.from_token(format_match.group(2)),
        css=rule,
    )


def split_css_into_fonts(css: str) -> list[FontFace]:
    """Parse a Google Fonts stylesheet into font faces, in document order.

    Works with and without subset comments. Anything in the stylesheet that
    isn't a comment or an @font-face rule is reported as a parse error.
    """
    fonts = []
    for number, block in enumerate(split_css_into_blocks(css), 1):
        leftover = FONT_FACE_RE.sub("", block.css).strip()
        if leftover:
            raise FontFaceParseError(
                f"Unexpected text in {_describe_subset(block.subset)} block {number}: "
                f"{_excerpt(leftover)!r}"
            )
        for match in FONT_FACE_RE.finditer(block.css):
            fonts.append(parse_font_face(match.group(0), block.subset))
    return fonts


# ---------------------------------------------------------------------------
# Filenames
# ---------------------------------------------------------------------------

def _filename_stem(font: FontFace, style: str) -> str:
    if style == "subset":
        parts = [font.family.lower().replace(" ", "-"), font.weight, font.style]
        if font.subset:
            parts.append(font.subset)
    elif style == "family":
        parts = [font.family, font.weight, font.style]
    else:
        raise ValueError(f"Unknown filename style: {style!r} (expected one of {FILENAME_STYLES})")
    for part in parts:
        if any(char in part for char in UNSAFE_FILENAME_CHARS):
            raise UnsafeFilenameError(
                f"Refusing to derive a filename from {part!r} "
                f"({_describe_subset(font.subset)} '{font.family}'): contains a path separator"
            )
    return "-".join(parts)


def font_filename(font: FontFace, style: str = "subset") -> str:
    """Local filename for the font binary, e.g. ``inter-400-normal-latin.woff2``."""
    extension = font.format.extension
    if not extension:
        declared = SRC_FORMAT_RE.search(font.css)
        raise UnsupportedFontFormatError(
            f"Unsupported font format for '{font.family}' {font.weight} {font.style} "
            f"({_describe_subset(font.subset)}): "
            f"{declared.group(2) if declared else font.format.value}"
        )
    return f"{_filename_stem(font, style)}.{extension}"


def css_filename(font: FontFace, style: str = "subset") -> str:
    return f"{_filename_stem(font, style)}.css"


def derive_filenames(font: FontFace, style: str = "subset") -> tuple[str, str]:
    """Return (font filename, CSS filename) for a font face."""
    return font_filename(font, style), css_filename(font, style)


# ---------------------------------------------------------------------------
# CSS rewriting
# ---------------------------------------------------------------------------

def rewrite_css(font: FontFace, filename: str, prefix: str) -> str:
    """Return the font's original rule with its src url() pointing at prefix/filename."""
    src = PROPERTY_PATTERNS["src"].search(font.css)
    url = SRC_URL_RE.search(font.css, src.start(1), src.end(1)) if src else None
    if url is None:
        raise FontFaceParseError(
            f"No src url() to rewrite in {_describe_subset(font.subset)} @font-face rule: "
            f"{_excerpt(font.css)!r}"
        )
    return font.css[:url.start(2)] + f"{prefix}/{filename}" + font.css[url.end(2):]


# ---------------------------------------------------------------------------
# Download and write
# ---------------------------------------------------------------------------

class Reporter:
    """Console output gated by --quiet and --verbose."""

    def __init__(self, quiet: bool = False, verbose: bool = False):
        self.quiet = quiet
        self.verbose = verbose and not quiet

    def info(self, msg: str) -> None:
        if not self.quiet:
            print(msg)

    def detail(self, msg: str) -> None:
        if self.verbose:
            print(msg)


def normalize_prefix(prefix: str) -> str:
    """Strip trailing slashes so "./" + "/" + name doesn't double up."""
    return prefix.rstrip("/")


def create_session() -> requests.Session:
    return requests.Session()


def fetch_css(
    session: requests.Session, url: str, timeout: float = DEFAULT_TIMEOUT, browser: bool = True
) -> str:
    """Download a stylesheet.

    With browser=True the request poses as a desktop browser and gets the
    per-subset woff2 stylesheet; otherwise the session's own User-Agent gets
    the single-subset truetype one.
    """
    headers = {"User-Agent": USER_AGENT} if browser else {}
    resp = session.get(url, headers=headers, timeout=timeout)
    resp.raise_for_status()
    return resp.content.decode("utf-8")


def fetch_font(session: requests.Session, url: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    resp = session.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp.content


def _should_skip(path: Path, overwrite: bool, reporter: Reporter) -> bool:
    """True (and report it) when path exists and overwrite is off."""
    if path.exists() and not overwrite:
        reporter.info(
            f"Skipped writing to '{path}' (file already exists, use --overwrite to overwrite)."
        )
        return True
    return False


def write_output(
    path: Path, data: bytes | str, kind: str, overwrite: bool, reporter: Reporter
) -> bool:
    """Write bytes or text to path unless it exists and overwrite is off.

    Returns True if the file was written, False if it was skipped.
    """
    if _should_skip(path, overwrite, reporter):
        return False
    try:
        if isinstance(data, bytes):
            path.write_bytes(data)
        else:
            path.write_text(data, encoding="utf-8")
    except OSError as e:
        raise FontWriteError(f"Error writing {kind} file '{path.name}': {e}") from e
    reporter.info(f"Wrote {kind} file to '{path.name}'.")
    return True


def _report_font(font: FontFace, reporter: Reporter) -> None:
    reporter.detail(f"  Font family: {font.family}")
    reporter.detail(f"  Font style: {font.style}")
    reporter.detail(f"  Font weight: {font.weight}")
    if font.stretch is not None:
        reporter.detail(f"  Font stretch: {font.stretch}")
    reporter.detail(f"  Font display: {font.display}")
    reporter.detail(f"  Writing system: {font.subset}")
    reporter.detail(f"  Format: {font.format.value}")
    reporter.detail(f"  Extension: {font.format.extension}")


def _check_collisions(plan: list[tuple[FontFace, str, str]]) -> None:
    seen: dict[str, FontFace] = {}
    for font, font_name, _css_name in plan:
        other = seen.setdefault(font_name, font)
        if other is not font:
            raise FilenameCollisionError(
                f"'{font_name}' would hold both the {_describe_subset(other.subset)} and "
                f"{_describe_subset(font.subset)} '{font.family}' fonts; "
                "use --filename-style subset"
            )


def download_fonts(
    session: requests.Session,
    url: str,
    output_dir: Path,
    fonts_prefix: str,
    overwrite: bool = False,
    filename_style: str = "subset",
    timeout: float = DEFAULT_TIMEOUT,
    reporter: Reporter | None = None,
) -> dict:
    """Download every font referenced by the stylesheet at url into output_dir.

    The whole stylesheet is parsed and every filename derived before the
    first font is fetched, so a malformed stylesheet writes nothing.
    Returns counts of fonts seen, files written and files skipped.
    """
    reporter = reporter or Reporter()
    output_dir = Path(output_dir)

    reporter.info(f"Downloading CSS: '{url}'.")
    # The family style has no subset segment, so ask for the single-subset sheet.
    css = fetch_css(session, url, timeout=timeout, browser=filename_style != "family")
    reporter.detail(f"Downloaded CSS content ({len(css)} bytes)")

    fonts = split_css_into_fonts(css)
    reporter.detail(f"Found {len(fonts)} font entries in the CSS")
    plan = [(font, *derive_filenames(font, filename_style)) for font in fonts]
    _check_collisions(plan)

    summary = {"fonts": len(fonts), "written": 0, "skipped": 0}
    for font, font_name, css_name in plan:
        font_path = output_dir / font_name
        css_path = output_dir / css_name

        if _should_skip(font_path, overwrite, reporter):
            summary["skipped"] += 1
        else:
            reporter.info(f"Downloading font file: '{font.url}'.")
            _report_font(font, reporter)
            data = fetch_font(session, font.url, timeout=timeout)
            reporter.detail(f"  Downloaded font file ({len(data)} bytes)")
            write_output(font_path, data, "font", overwrite=True, reporter=reporter)
            summary["written"] += 1

        reporter.detail(f"  Writing CSS file with updated font path: {css_name}")
        new_css = rewrite_css(font, font_name, fonts_prefix)
        if write_output(css_path, new_css, "CSS", overwrite, reporter):
            summary["written"] += 1
        else:
            summary["skipped"] += 1

    return summary


def ensure_output_dir(output_dir: str | Path) -> Path:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Download Google Fonts stylesheets and their font files for self-hosting."
    )
    parser.add_argument(
        "urls", nargs="+", metavar="URL",
        help="Google Fonts stylesheet URL(s), e.g. https://fonts.googleapis.com/css2?family=Inter"
    )
    parser.add_argument(
        "-w", "--overwrite", action="store_true",
        help="Whether to overwrite existing files."
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true",
        help="Suppress informational output, including verbose output."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable verbose output."
    )
    parser.add_argument(
        "--fonts-prefix", default=DEFAULT_FONTS_PREFIX,
        help=f"Prefix for font files in CSS output (default: {DEFAULT_FONTS_PREFIX})"
    )
    parser.add_argument(
        "-o", "--output", default=DEFAULT_OUTPUT_DIR,
        help="The name of the output directory, will be created if it doesn't exist "
             f"(default: {DEFAULT_OUTPUT_DIR})"
    )
    parser.add_argument(
        "--timeout", type=float, default=DEFAULT_TIMEOUT,
        help=f"HTTP timeout in seconds for each request (default: {DEFAULT_TIMEOUT})"
    )
    parser.add_argument(
        "--filename-style", choices=FILENAME_STYLES, default="subset",
        help="'subset': inter-400-normal-latin.woff2 (default); "
             "'family': Inter-400-normal.woff2, no subset label"
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    reporter = Reporter(quiet=args.quiet, verbose=args.verbose)
    fonts_prefix = normalize_prefix(args.fonts_prefix)

    try:
        output_dir = ensure_output_dir(args.output)
    except OSError as e:
        print(f"Failed to create output directory: '{e}'.")
        sys.exit(1)

    with create_session() as session:
        for url in args.urls:
            try:
                summary = download_fonts(
                    session,
                    url,
                    output_dir,
                    fonts_prefix,
                    overwrite=args.overwrite,
                    filename_style=args.filename_style,
                    timeout=args.timeout,
                    reporter=reporter,
                )
            except (FontDownloadError, requests.RequestException, UnicodeDecodeError) as e:
                print(f"Error: {e}")
                sys.exit(1)
            reporter.detail(
                f"{summary['fonts']} font(s): {summary['written']} file(s) written, "
                f"{summary['skipped']} skipped"
            )

    reporter.info("Done.")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Image Scraper - Archive the images of a web page into a static HTML report.

This script fetches a page, finds every <img> tag on it, downloads each image
under a sanitized name tagged with its real (content-sniffed) format, and
writes an index.html that previews every image next to its source URL,
original dimensions and format. Images that cannot be resolved, fetched or
decoded are skipped and logged; they never abort the run.
"""

import os
import re
import sys
import time
import logging
import argparse
import ipaddress
from dataclasses import dataclass
from datetime import datetime
from html import escape
from io import BytesIO
from typing import Optional
from urllib.parse import urlparse, urljoin

# Third-party imports - make sure these are installed
import filetype
import requests
from bs4 import BeautifulSoup
from PIL import Image, UnidentifiedImageError
from tqdm import tqdm

logger = logging.getLogger('image_scraper')

DEFAULT_MAX_WIDTH = 120
REPORT_FILENAME = 'index.html'
SNIFF_BYTES = 8192
CHUNK_SIZE = 8192
USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36'
)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_FAILURE = 1
EXIT_INVALID_URL = 2
EXIT_INTERRUPTED = 130


def setup_logging(verbose=False, quiet=False, log_file='image_scraper.log'):
    """
    Configure the module logger for command-line use.

    Args:
        verbose (bool): Log at DEBUG level
        quiet (bool): Only log warnings and errors (wins over verbose)
        log_file (str): File that receives a copy of every log line
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    if quiet:
        log_level = logging.WARNING

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )
    logger.setLevel(log_level)

###################
# Errors
###################

class ScraperError(Exception):
    """Base class for every error raised by the scraper."""


class FatalError(ScraperError):
    """An error that aborts the whole run."""


class InvalidURLError(FatalError):
    """The page URL supplied by the user is not a valid URL."""


class PageFetchError(FatalError):
    """The page itself could not be retrieved."""


class OutputSetupError(FatalError):
    """The output directory or report file could not be created."""


class ImageError(ScraperError):
    """A per-image failure; the image is skipped and the run continues."""


class MalformedURLError(ImageError):
    """An image src could not be turned into a fetchable URL."""


class InvalidDimensionError(ImageError):
    """A declared width/height attribute is not a non-negative integer."""


class ImageDecodeError(ImageError):
    """The image bytes could not be decoded to read its dimensions."""


class DownloadError(ImageError):
    """A network or filesystem fault while fetching or saving an image."""


class UnsupportedFormatError(ImageError):
    """Content sniffing could not classify the bytes as an image."""

###################
# Data Model
###################

@dataclass(frozen=True)
class ImageRecord:
    """One <img> element as found in the page."""

    src: str
    width: Optional[str] = None
    height: Optional[str] = None


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of decoding image bytes: dimensions on success, a reason otherwise."""

    ok: bool
    width: int = 0
    height: int = 0
    reason: str = ''

    @classmethod
    def success(cls, width, height):
        return cls(ok=True, width=width, height=height)

    @classmethod
    def failure(cls, reason):
        return cls(ok=False, reason=reason)


@dataclass(frozen=True)
class SavedImage:
    """An image written to the output directory."""

    fetch_url: str
    format: str
    saved_file_name: str


@dataclass(frozen=True)
class ResolvedImage:
    """Everything the report needs to know about one downloaded image."""

    fetch_url: str
    original_width: int
    original_height: int
    display_width: int
    display_height: int
    format: str
    saved_file_name: str


@dataclass(frozen=True)
class ImageOutcome:
    """Result of pushing one ImageRecord through the pipeline."""

    record: ImageRecord
    status: str
    image: Optional[ResolvedImage] = None
    error: Optional[ImageError] = None

    @property
    def downloaded(self):
        return self.status == 'downloaded'


@dataclass
class ScrapeSummary:
    """Result of a complete run."""

    page_url: str
    report_path: str
    outcomes: list

    @property
    def downloaded(self):
        return sum(1 for outcome in self.outcomes if outcome.downloaded)

    @property
    def skipped(self):
        return len(self.outcomes) - self.downloaded

###################
# URL Resolver
###################

RESOLVE_POLICIES = ('heuristic', 'standard')


class URLResolver:
    """Normalizes page URLs and turns image src attributes into fetchable URLs."""

    URL_PATTERN = re.compile(
        r'^(?:http|https)://'  # http:// or https://
        r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+(?:[A-Z]{2,6}\.?|[A-Z0-9-]{2,}\.?)|'  # domain
        r'localhost|'  # localhost
        r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})'  # or IP
        r'(?::\d+)?'  # optional port
        r'(?:/?|[/?]\S+)$', re.IGNORECASE)

    WWW_LABEL = re.compile(r'^www\d*\.', re.IGNORECASE)

    @staticmethod
    def validate_url(url):
        """
        Validate if the given string is a properly formatted http(s) URL.

        Args:
            url (str): The URL to validate

        Returns:
            bool: True if valid, False otherwise
        """
        return bool(url) and bool(URLResolver.URL_PATTERN.match(url))

    @staticmethod
    def is_fetchable(url):
        """Return True if url is an absolute http(s) URL with a host."""
        try:
            parsed = urlparse(url)
        except ValueError:
            return False
        if any(c.isspace() for c in url):
            return False
        return parsed.scheme in ('http', 'https') and bool(parsed.hostname)

    @staticmethod
    def normalize_page_url(url):
        """
        Normalize the page URL supplied by the user.

        The scheme is upgraded to https and, unless the host already carries
        a www-style label, is an IP address or is a bare single-label host,
        "www." is injected in front of the host.

        Args:
            url (str): The URL as typed by the user

        Returns:
            str: The normalized page URL

        Raises:
            InvalidURLError: If the input is not a valid http(s) URL
        """
        url = (url or '').strip()
        if not URLResolver.validate_url(url):
            raise InvalidURLError(f"Invalid URL: {url!r}")

        rest = url.split('://', 1)[1]
        host = urlparse(url).hostname or ''
        if not URLResolver._has_www_prefix(host):
            rest = 'www.' + rest
        return 'https://' + rest

    @staticmethod
    def _has_www_prefix(host):
        if URLResolver.WWW_LABEL.match(host) or '.' not in host:
            return True
        try:
            ipaddress.ip_address(host)
        except ValueError:
            return False
        return True

    @staticmethod
    def site_root(page):
        """
        Truncate a page URL to its scheme and host.

        Everything from the third '/' on is dropped, so
        "https://www.example.com/a/b.html" becomes "https://www.example.com".
        """
        parts = page.split('/', 3)
        if len(parts) > 3:
            return '/'.join(parts[:3])
        return page

    @staticmethod
    def heuristic_policy(src, page):
        """
        Resolve src by counting dots.

        More than one '.' is taken to mean a dotted host name: a src that
        contains "http" is used as-is, anything else is treated as
        protocol-relative and gets the https scheme. One dot or fewer means a
        site-relative path, which is appended to the page's scheme and host.

        Known false positives: a relative path whose query string holds two
        dots is treated as absolute, and an absolute URL on a dotless host
        is treated as relative. Use standard_policy for RFC 3986 joining.
        """
        if src.count('.') > 1:
            if 'http' in src:
                return src
            if src.startswith('//'):
                return 'https:' + src
            return 'https://' + src.lstrip('/')

        if not src.startswith('/'):
            src = '/' + src
        return URLResolver.site_root(page) + src

    @staticmethod
    def standard_policy(src, page):
        """Resolve src against page the way a browser does."""
        return urljoin(page, src)

    @staticmethod
    def resolve_image_url(src, page, policy='heuristic'):
        """
        Turn an image src attribute into a fully qualified URL.

        Args:
            src (str): Raw src attribute value
            page (str): Normalized page URL
            policy (str): "heuristic" or "standard"

        Returns:
            str: Absolute image URL

        Raises:
            MalformedURLError: If the result is not a fetchable http(s) URL
            ValueError: If policy is unknown
        """
        if policy == 'heuristic':
            resolve = URLResolver.heuristic_policy
        elif policy == 'standard':
            resolve = URLResolver.standard_policy
        else:
            raise ValueError(f"Unknown resolve policy: {policy!r}")

        src = (src or '').strip()
        if not src:
            raise MalformedURLError("Image has an empty src attribute")
        if src.lower().startswith('data:'):
            raise MalformedURLError("Inline data: URIs are not fetchable")

        url = resolve(src, page)
        if not URLResolver.is_fetchable(url):
            raise MalformedURLError(f"Malformed image URL: {url!r} (src={src!r})")
        return url

###################
# Web Scraper
###################

class WebScraper:
    """Retrieves HTML content from websites."""

    def __init__(self, session):
        """
        Initialize the web scraper.

        Args:
            session (requests.Session): Session used for the page request
        """
        self.session = session

    def get_html_content(self, url, timeout=None):
        """
        Retrieve the HTML content from the given URL.

        Args:
            url (str): The URL to retrieve content from
            timeout (float, optional): Request timeout in seconds

        Returns:
            str: The HTML content

        Raises:
            PageFetchError: If there's an error retrieving the content
        """
        try:
            logger.info(f"Retrieving content from {url}")
            response = self.session.get(url, timeout=timeout)
            response.raise_for_status()
            return response.text
        except requests.RequestException as e:
            raise PageFetchError(f"Error retrieving {url}: {e}") from e

###################
# Image Extractor
###################

class ImageExtractor:
    """Extracts <img> records from HTML content."""

    def extract_image_records(self, html_content):
        """
        Extract every <img> tag in document order.

        Duplicates are kept: the report mirrors the page one row per tag.

        Args:
            html_content (str): The HTML content to parse

        Returns:
            list: ImageRecord objects
        """
        soup = BeautifulSoup(html_content, 'html.parser')
        records = []
        for img in soup.find_all('img'):
            records.append(ImageRecord(
                src=img.get('src') or '',
                width=img.get('width'),
                height=img.get('height'),
            ))
        logger.info(f"Found {len(records)} images")
        return records

###################
# Image Fetcher
###################

class ImageFetcher:
    """
    Fetches image bytes over a shared requests session.

    The most recent response is remembered so that probing an image's
    dimensions and then downloading it costs a single request.
    """

    def __init__(self, session, timeout=None):
        self.session = session
        self.timeout = timeout
        self._last_url = None
        self._last_data = None

    def fetch(self, url):
        """
        Fetch the full body of url.

        Raises:
            DownloadError: On any network or HTTP status failure
        """
        if url == self._last_url:
            logger.debug(f"Reusing buffered response for {url}")
            return self._last_data

        try:
            response = self.session.get(url, timeout=self.timeout, stream=True)
            response.raise_for_status()
            data = b''.join(response.iter_content(chunk_size=CHUNK_SIZE))
        except requests.RequestException as e:
            raise DownloadError(f"Download error: {url} - {e}") from e

        self._last_url = url
        self._last_data = data
        return data

    def reset(self):
        """Forget the buffered response."""
        self._last_url = None
        self._last_data = None

###################
# Format Detector
###################

SVG_FORMAT = 'svg+xml'
UTF8_BOM = b'\xef\xbb\xbf'
SVG_ROOT = re.compile(
    rb'\s*(?:<\?xml[^>]*\?>\s*|<!--.*?-->\s*|<!DOCTYPE[^>]*>\s*)*<svg[\s>/]',
    re.IGNORECASE | re.DOTALL)


def _looks_like_svg(head):
    """Return True if head opens with an <svg> root element."""
    if head.startswith(UTF8_BOM):
        head = head[len(UTF8_BOM):]
    return bool(SVG_ROOT.match(head))


def detect_format(source):
    """
    Determine an image's format from its leading bytes.

    Args:
        source (bytes or file-like): Image content, or a binary stream whose
            first SNIFF_BYTES are read

    Returns:
        str: Lowercase MIME subtype, e.g. "png", "jpeg", "gif", "svg+xml"

    Raises:
        UnsupportedFormatError: If the content is not a recognizable image
    """
    if hasattr(source, 'read'):
        head = source.read(SNIFF_BYTES)
    else:
        head = bytes(source[:SNIFF_BYTES])

    kind = filetype.guess(head) if head else None
    if kind is None:
        # filetype only knows binary signatures; SVG is XML text
        if _looks_like_svg(head):
            return SVG_FORMAT
        raise UnsupportedFormatError("Could not determine the content type")
    maintype, _, subtype = kind.mime.partition('/')
    if maintype != 'image':
        raise UnsupportedFormatError(f"Not an image (detected {kind.mime})")
    return subtype.lower()

###################
# Dimension Resolver
###################

def _parse_dimension(name, value):
    try:
        number = int(value.strip())
    except ValueError:
        raise InvalidDimensionError(f"Declared {name} {value!r} is not an integer") from None
    if number < 0:
        raise InvalidDimensionError(f"Declared {name} {value!r} is negative")
    return number


def parse_declared_dimensions(record):
    """
    Return the declared (width, height) of record, or None if either is missing.

    Raises:
        InvalidDimensionError: If a declared value is not a non-negative integer
    """
    width, height = record.width, record.height
    if not width or not width.strip() or not height or not height.strip():
        return None
    return _parse_dimension('width', width), _parse_dimension('height', height)


def probe_dimensions(data):
    """
    Decode image bytes with Pillow and report their pixel size.

    Args:
        data (bytes): Raw image content

    Returns:
        DecodeResult: Dimensions on success, the reason otherwise
    """
    try:
        with Image.open(BytesIO(data)) as img:
            width, height = img.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        return DecodeResult.failure(str(e) or e.__class__.__name__)
    return DecodeResult.success(width, height)


def resolve_dimensions(record, fetch_url, fetcher):
    """
    Determine the true pixel dimensions of an image.

    Declared width/height attributes win when both are present; otherwise the
    image is fetched and decoded.

    Args:
        record (ImageRecord): The extracted <img> record
        fetch_url (str): Resolved URL of the image
        fetcher (ImageFetcher): Used when the image has to be decoded

    Returns:
        tuple: (width, height) in pixels

    Raises:
        InvalidDimensionError: Declared values are not integers
        DownloadError: The image could not be fetched
        ImageDecodeError: The image could not be decoded
    """
    declared = parse_declared_dimensions(record)
    if declared is not None:
        return declared

    result = probe_dimensions(fetcher.fetch(fetch_url))
    if not result.ok:
        raise ImageDecodeError(f"Error reading image: {result.reason}")
    return result.width, result.height


def cap_for_display(width, height, max_width=DEFAULT_MAX_WIDTH):
    """
    Shrink dimensions to max_width, keeping the aspect ratio.

    Images that already fit are never upscaled. The height is rounded half
    up, so a scaled height of 0.5 becomes 1.
    """
    if width <= max_width:
        return width, height
    return max_width, int(height * max_width / width + 0.5)

###################
# Image Downloader
###################

NON_WORD = re.compile(r'[^A-Za-z0-9_]+')


def sanitize_file_name(src):
    """
    Build a filesystem-safe base name from an image src.

    The last path segment is taken, everything from its first '.' is dropped
    and each run of characters outside [A-Za-z0-9_] collapses to '_'.

    Args:
        src (str): Raw src attribute

    Returns:
        str: Sanitized base name without extension
    """
    name = src[src.rfind('/') + 1:]
    if '.' in name:
        name = name[:name.index('.')]
    name = NON_WORD.sub('_', name)
    return name or 'image'


class ImageDownloader:
    """Saves images under their sanitized name and sniffed format."""

    def __init__(self, fetcher, policy='heuristic'):
        """
        Initialize the image downloader.

        Args:
            fetcher (ImageFetcher): Source of image bytes
            policy (str): URL resolve policy, see URLResolver.resolve_image_url
        """
        self.fetcher = fetcher
        self.policy = policy

    def download(self, src, page, destination_dir):
        """
        Download one image into destination_dir.

        An existing file with the same name is overwritten.

        Args:
            src (str): Raw src attribute
            page (str): Normalized page URL
            destination_dir (str): Directory the image is written to

        Returns:
            SavedImage: Where the image came from and where it went

        Raises:
            MalformedURLError: src cannot be resolved
            DownloadError: Fetching or writing failed
            UnsupportedFormatError: The bytes are not a recognizable image
        """
        url = URLResolver.resolve_image_url(src, page, self.policy)
        data = self.fetcher.fetch(url)

        # Extension comes from the sniffed format
        image_format = detect_format(data)
        filename = f"{sanitize_file_name(src)}.{image_format}"
        filepath = os.path.join(destination_dir, filename)

        # Last write wins
        try:
            with open(filepath, 'wb') as f:
                f.write(data)
        except OSError as e:
            raise DownloadError(f"Could not write {filepath}: {e}") from e

        logger.debug(f"Saved {url} as {filepath} ({len(data)} bytes)")
        return SavedImage(fetch_url=url, format=image_format, saved_file_name=filename)

###################
# Report Builder
###################

REPORT_HEADER = (
    '<!DOCTYPE html>\n<html>\n<head>\n<title> Scraped Images </title>\n</head>\n'
    # gray, so transparent white images stay visible
    '<body style="background-color:#d3d3d3">\n<table>\n'
)
REPORT_FOOTER = '</table>\n</body>\n</html>\n'


class ReportBuilder:
    """Collects one table row per image and renders the report page."""

    def __init__(self):
        self.rows = []

    def append_row(self, image):
        """
        Append a row for a downloaded image.

        Args:
            image (ResolvedImage): The image to describe
        """
        img_tag = (
            f'<img src="{escape(image.saved_file_name)}" '
            f'height="{image.display_height}" width="{image.display_width}">'
        )
        url = escape(image.fetch_url)
        info = (
            f'URL: <a href="{url}">{url}</a><br>\n'
            f' Original Size: {image.original_width}x{image.original_height}<br>\n'
            f' Format: {escape(image.format)}'
        )
        self.rows.append(f'<tr>\n<td> {img_tag} </td>\n<td> {info}</td>\n</tr>\n')

    def render(self):
        return REPORT_HEADER + ''.join(self.rows) + REPORT_FOOTER

    def write(self, path):
        """
        Write the rendered report to path.

        Raises:
            OutputSetupError: If the file cannot be written
        """
        try:
            with open(path, 'w', encoding='utf-8') as f:
                f.write(self.render())
        except OSError as e:
            raise OutputSetupError(f"Could not write report {path}: {e}") from e

###################
# Progress Tracker
###################

class ProgressTracker:
    """Tracks per-image progress with a progress bar."""

    def __init__(self, total=0, desc="Scraping", unit="img", enabled=True):
        """
        Initialize the progress tracker.

        Args:
            total (int): Total number of images
            desc (str): Description for the progress bar
            unit (str): Unit name for the progress bar
            enabled (bool): When False, nothing is displayed
        """
        self.total = total
        self.desc = desc
        self.unit = unit
        self.enabled = enabled
        self.progress_bar = None
        self.start_time = None
        self.stats = {
            'downloaded': 0,
            'skipped': 0,
        }

    def start(self, total=None):
        if total is not None:
            self.total = total

        self.start_time = time.time()
        if self.enabled:
            self.progress_bar = tqdm(
                total=self.total,
                desc=self.desc,
                unit=self.unit,
                bar_format='{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}]'
            )

    def update(self, outcome):
        """
        Record one processed image.

        Args:
            outcome (ImageOutcome): Result for the image
        """
        if outcome.downloaded:
            self.stats['downloaded'] += 1
        else:
            self.stats['skipped'] += 1

        if not self.progress_bar:
            return
        self.progress_bar.update(1)
        self.progress_bar.set_postfix(
            downloaded=self.stats['downloaded'],
            skipped=self.stats['skipped']
        )

    def finish(self):
        """Close the progress bar and print a summary."""
        if not self.progress_bar:
            return

        self.progress_bar.close()

        # Calculate elapsed time
        elapsed = time.time() - (self.start_time or time.time())

        # Print summary
        print("\nScrape Summary:")
        print(f"Total images: {self.total}")
        print(f"Downloaded: {self.stats['downloaded']}")
        print(f"Skipped: {self.stats['skipped']}")
        print(f"Total time: {elapsed:.2f} seconds")
        print(f"Completed at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

###################
# Pipeline
###################

class ScrapePipeline:
    """Drives every image of a page through resolve, download and report."""

    def __init__(self, session=None, max_width=DEFAULT_MAX_WIDTH, policy='heuristic',
                 timeout=None, report_name=REPORT_FILENAME, show_progress=False):
        """
        Initialize the pipeline.

        Args:
            session (requests.Session, optional): Session for all requests;
                a new one is created when omitted
            max_width (int): Maximum preview width in the report
            policy (str): URL resolve policy ("heuristic" or "standard")
            timeout (float, optional): Request timeout in seconds, None for none
            report_name (str): File name of the report inside the output dir
            show_progress (bool): Display a progress bar
        """
        if policy not in RESOLVE_POLICIES:
            raise ValueError(f"Unknown resolve policy: {policy!r}")
        if session is None:
            session = requests.Session()
            session.headers.update({'User-Agent': USER_AGENT})
        self.session = session
        self.max_width = max_width
        self.policy = policy
        self.timeout = timeout
        self.report_name = report_name
        self.show_progress = show_progress

        self.scraper = WebScraper(session)
        self.extractor = ImageExtractor()
        self.fetcher = ImageFetcher(session, timeout=timeout)
        self.downloader = ImageDownloader(self.fetcher, policy=policy)

    def process_image(self, record, page, output_dir):
        """
        Resolve, download and describe one image.

        Args:
            record (ImageRecord): The extracted <img> record
            page (str): Normalized page URL
            output_dir (str): Directory images are saved to

        Returns:
            ImageOutcome: "downloaded" with the ResolvedImage, or "skipped"
                with the error that stopped it
        """
        try:
            url = URLResolver.resolve_image_url(record.src, page, self.policy)
            width, height = resolve_dimensions(record, url, self.fetcher)
            saved = self.downloader.download(record.src, page, output_dir)
        except ImageError as e:
            logger.error(f"Error processing image {record.src!r}: {e}")
            return ImageOutcome(record=record, status='skipped', error=e)

        display_width, display_height = cap_for_display(width, height, self.max_width)
        logger.info(f"Downloaded image: {record.src}")
        image = ResolvedImage(
            fetch_url=saved.fetch_url,
            original_width=width,
            original_height=height,
            display_width=display_width,
            display_height=display_height,
            format=saved.format,
            saved_file_name=saved.saved_file_name,
        )
        return ImageOutcome(record=record, status='downloaded', image=image)

    def run(self, page_url, output_dir):
        """
        Scrape page_url into output_dir.

        Args:
            page_url (str): Page URL as supplied by the user
            output_dir (str): Directory for the images and the report

        Returns:
            ScrapeSummary: Per-image outcomes and the report location

        Raises:
            InvalidURLError: page_url is not a valid URL
            PageFetchError: The page could not be retrieved
            OutputSetupError: The output directory or report could not be written
        """
        page = URLResolver.normalize_page_url(page_url)
        self.fetcher.reset()

        # Get the page and its <img> tags
        html_content = self.scraper.get_html_content(page, timeout=self.timeout)
        records = self.extractor.extract_image_records(html_content)

        # Create output directory
        try:
            os.makedirs(output_dir, exist_ok=True)
        except OSError as e:
            raise OutputSetupError(f"Could not create output directory {output_dir}: {e}") from e

        report = ReportBuilder()
        tracker = ProgressTracker(total=len(records), enabled=self.show_progress)
        tracker.start()
        outcomes = []
        try:
            for record in records:
                outcome = self.process_image(record, page, output_dir)
                if outcome.downloaded:
                    report.append_row(outcome.image)
                outcomes.append(outcome)
                tracker.update(outcome)
        finally:
            tracker.finish()

        # Write the report once every image has been handled
        report_path = os.path.join(output_dir, self.report_name)
        report.write(report_path)
        logger.info(f"Scraped to: {output_dir}")
        return ScrapeSummary(page_url=page, report_path=report_path, outcomes=outcomes)

    def close(self):
        self.session.close()

###################
# Command Line
###################

class UsageArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that prints usage to stdout and exits with status 1."""

    def error(self, message):
        self.print_usage(sys.stdout)
        print(f"{self.prog}: error: {message}")
        sys.exit(EXIT_USAGE)


def positive_int(value):
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return number


def positive_float(value):
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return number


def parse_arguments(argv=None):
    """
    Parse command-line arguments.

    Args:
        argv (list, optional): Arguments to parse instead of sys.argv[1:]

    Returns:
        argparse.Namespace: Parsed arguments
    """
    parser = UsageArgumentParser(
        prog='image-scraper',
        description='Download the images of a web page and build an HTML report of them.',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # Required arguments
    parser.add_argument(
        'url',
        help='URL of the page to scrape images from'
    )
    parser.add_argument(
        'output_dir',
        help='Directory to write the images and the report to'
    )

    # Output options
    output_group = parser.add_argument_group('Output Options')
    output_group.add_argument(
        '--report-name',
        default=REPORT_FILENAME,
        help='File name of the HTML report inside the output directory'
    )

    # Image options
    image_group = parser.add_argument_group('Image Options')
    image_group.add_argument(
        '--max-width',
        type=positive_int,
        default=DEFAULT_MAX_WIDTH,
        help='Maximum preview width in the report; taller images keep their aspect ratio'
    )
    image_group.add_argument(
        '--resolve',
        choices=RESOLVE_POLICIES,
        default='heuristic',
        help='How image src attributes are resolved against the page URL'
    )

    # Network options
    network_group = parser.add_argument_group('Network Options')
    network_group.add_argument(
        '--timeout',
        type=positive_float,
        default=None,
        help='Request timeout in seconds (no timeout when omitted)'
    )
    network_group.add_argument(
        '--user-agent',
        default=USER_AGENT,
        help='User-Agent header sent with every request'
    )

    # Display options
    display_group = parser.add_argument_group('Display Options')
    display_group.add_argument(
        '--no-progress',
        action='store_true',
        help='Do not show progress bar'
    )
    display_group.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Quiet mode (minimal output)'
    )
    display_group.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose mode (detailed output)'
    )

    return parser.parse_args(argv)

###################
# Main Application
###################

class ImageScraperApp:
    """Main application class for the image scraper."""

    def __init__(self, args):
        """
        Initialize the image scraper application.

        Args:
            args (argparse.Namespace): Command-line arguments
        """
        self.args = args

        session = requests.Session()
        session.headers.update({'User-Agent': args.user_agent})
        self.pipeline = ScrapePipeline(
            session=session,
            max_width=args.max_width,
            policy=args.resolve,
            timeout=args.timeout,
            report_name=args.report_name,
            show_progress=not (args.no_progress or args.quiet)
        )

    def run(self):
        """
        Run the image scraper application.

        Returns:
            int: Exit code (0 for success, non-zero for failure)
        """
        try:
            summary = self.pipeline.run(self.args.url, self.args.output_dir)
            logger.info(
                f"Report written to {summary.report_path}: "
                f"{summary.downloaded} downloaded, {summary.skipped} skipped"
            )
            return EXIT_OK

        except InvalidURLError as e:
            logger.error(str(e))
            return EXIT_INVALID_URL

        except FatalError as e:
            logger.error(str(e))
            if self.args.verbose:
                import traceback
                traceback.print_exc()
            return EXIT_FAILURE

        except KeyboardInterrupt:
            logger.info("Scrape interrupted by user")
            return EXIT_INTERRUPTED

        finally:
            self.pipeline.close()


def main(argv=None):
    """Main entry point for the application."""
    args = parse_arguments(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    app = ImageScraperApp(args)
    return app.run()

if __name__ == "__main__":
    sys.exit(main())

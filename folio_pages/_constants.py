"""Common literal values used across folio_pages.

These constants keep filenames and markers centralized so the loader, the
generators, and tests can import the same values without drifting. Intended
for internal use within the folio_pages package.

Examples
--------
>>> from folio_pages import _constants
>>> _constants.INDEX_FILENAME
'index.md'
>>> _constants.CONTENT_SUFFIX
'.md'
"""

CONTENT_SUFFIX = ".md"
INDEX_FILENAME = f"index{CONTENT_SUFFIX}"
FRONT_MATTER_MARKER = "---"
PAGE_FILENAME = "index.html"
NOT_FOUND_FILENAME = "404.html"
FEED_FILENAME = "rss.xml"
CNAME_FILENAME = "CNAME"
AUTHORS_DIR = "authors"
TAGS_DIR = "tags"
IMAGE_MAX_WIDTH = 800

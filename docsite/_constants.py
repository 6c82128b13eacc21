"""Common literal values used across docsite.

These constants keep filenames and metadata keys centralised so the renderer,
templates, and tests can import the same values without drifting.

Examples
--------
>>> from docsite import _constants
>>> _constants.NAVIGATION_INDEX
'navigation.json'
>>> _constants.PAGE_ID_META
'docsite:id'
"""

DEFAULT_CONFIG_FILENAME = "docsite.yaml"
DOCUMENT_EXTENSIONS = (".md", ".mdx")
FRONT_MATTER_DELIMITER = "---"
NAVIGATION_INDEX = "navigation.json"
NOT_FOUND_PAGE = "404.html"
SITE_INDEX_PAGE = "index.html"
PAGE_ID_META = "docsite:id"

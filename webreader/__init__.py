"""Web reader: extract readable pages from the web and keep them locally.

Given a URL, the reader fetches the page, extracts its title and
paragraphs, stores the result in a local JSON file and follows the
page's "next" link to pick up the rest of a paginated article or
serial. Stored pages can be shared as plain text or read aloud.

The modules in this package are:

* ``extractor.py`` – Downloads a page with ``httpx`` and pulls out the
  title, paragraph texts and next-page link with ``BeautifulSoup``.

* ``reader.py`` – ``ReaderController``, which owns the page collection,
  the recent-search log and the new-pages counter, and runs extraction
  chains with cycle and length guards.

* ``store.py`` – Atomic whole-file JSON persistence of the pages.

* ``history.py`` – The in-memory recent-search log.

* ``tts.py`` – Text-to-speech providers and text chunking.

* ``main.py`` – The FastAPI application exposing all of the above.

* ``models.py``, ``errors.py``, ``config.py`` and ``logging_config.py``
  – Shared data types, the exception hierarchy, environment settings and
  JSON log output.
"""

__version__ = "0.1.0"

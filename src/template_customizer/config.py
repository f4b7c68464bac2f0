"""Local configuration for template_customizer."""

from __future__ import annotations

import os


DEFAULT_FETCH_TIMEOUT_S = 15.0
DEFAULT_FETCH_MAX_RETRIES = 2
DEFAULT_FETCH_BACKOFF_S = 0.5
DEFAULT_FETCH_CONCURRENCY = 6
DEFAULT_USER_AGENT = "template-customizer/0.1"

MANIFEST_FILENAME = "base-template-manifest.yaml"
README_CANDIDATES = ("README.adoc", "Readme.adoc", "readme.adoc", "ReadMe.adoc")

TEMPLATE_CUSTOMIZER_FETCH_TIMEOUT_S = float(
    os.getenv("TEMPLATE_CUSTOMIZER_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S))
)
TEMPLATE_CUSTOMIZER_FETCH_MAX_RETRIES = int(
    os.getenv("TEMPLATE_CUSTOMIZER_FETCH_MAX_RETRIES", str(DEFAULT_FETCH_MAX_RETRIES))
)
TEMPLATE_CUSTOMIZER_FETCH_BACKOFF_S = float(
    os.getenv("TEMPLATE_CUSTOMIZER_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S))
)
# Upper bound on simultaneous part downloads.
TEMPLATE_CUSTOMIZER_FETCH_CONCURRENCY = max(
    1, int(os.getenv("TEMPLATE_CUSTOMIZER_FETCH_CONCURRENCY", str(DEFAULT_FETCH_CONCURRENCY)))
)
TEMPLATE_CUSTOMIZER_USER_AGENT = os.getenv("TEMPLATE_CUSTOMIZER_USER_AGENT", DEFAULT_USER_AGENT)

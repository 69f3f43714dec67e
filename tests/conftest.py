"""
Shared fixtures for the textquarry test suite.
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio

from textquarry.config.config import Config
from textquarry.crawler.http_client import HttpClient

TARGET_URL = "https://example.com/blog/deploying-at-scale"

ARTICLE_PARAGRAPHS = [
    "Shipping software at scale requires careful planning, staged rollouts, and good observability everywhere.",
    "Over six months we moved forty services to the new platform, one team at a time, without a single outage.",
    "The hardest part was not the tooling but agreeing on ownership, escalation paths, and what done means.",
]

ARTICLE_HTML = f"""
<html>
  <head>
    <title>Deploying at Scale</title>
    <meta property="og:image" content="/images/hero.png">
    <meta name="description" content="How one platform team migrated forty services without an outage in six months.">
    <script>var tracking = "should never appear in output";</script>
  </head>
  <body>
    <nav><a href="/">Home</a> <a href="/blog">Blog</a></nav>
    <div id="main">
      <article>
        <p>{ARTICLE_PARAGRAPHS[0]}</p>
        <p>{ARTICLE_PARAGRAPHS[1]}</p>
        <p>{ARTICLE_PARAGRAPHS[2]}</p>
        <ul class="share">
          <li><a href="/a">Share this on a social network of your choice</a></li>
          <li><a href="/b">Share this by email with a colleague or a friend</a></li>
        </ul>
      </article>
      <div class="sidebar"><p>Sidebar widget text that is long enough to be scored.</p></div>
    </div>
    <footer>Copyright 2024 Example Corp. All rights reserved.</footer>
  </body>
</html>
"""


@pytest.fixture
def config() -> Config:
    """Default configuration with a short fetch timeout."""
    config = Config()
    config.fetch.timeout = 2.0
    return config


@pytest_asyncio.fixture
async def http_client(config: Config) -> AsyncGenerator[HttpClient, None]:
    """Create and initialize an HTTP client."""
    client = HttpClient(config)
    await client.initialize()
    yield client
    await client.close()


@pytest.fixture
def article_html() -> str:
    return ARTICLE_HTML

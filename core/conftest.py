from datetime import datetime, timedelta, timezone as dt_timezone

import pytest
from django.core.cache import cache


ACME_HTML = """
<html>
  <head>
    <title>Acme Widgets</title>
    <meta name="description" content="Acme builds precision widgets for industry.">
  </head>
  <body>
    <header><nav>Home About Contact</nav></header>
    <main>
      <h1>Welcome to Acme Widgets</h1>
      <p>We design and manufacture widgets. Our services: widget design and custom manufacturing.</p>
      <p>We provide: fast support for every widget order.</p>
    </main>
    <footer>Copyright Acme</footer>
    <script>var tracking = "ignore me";</script>
  </body>
</html>
"""


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=dt_timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def artifact_dir(settings, tmp_path):
    settings.ARTIFACT_DIR = str(tmp_path / "files")
    return tmp_path / "files"


@pytest.fixture
def acme_html():
    return ACME_HTML


@pytest.fixture
def fake_fetch(monkeypatch, acme_html):
    """Patches the network fetch; returns the list of requested URLs."""
    calls = []

    def _fetch(url, timeout_s=None):
        calls.append(url)
        return acme_html

    monkeypatch.setattr("core.websites.analysis.fetch_html", _fetch)
    return calls

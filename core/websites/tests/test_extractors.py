import pytest
import requests

from core.websites.extractors import (
    NO_DESCRIPTION,
    UNTITLED,
    FetchError,
    extract_page,
    fetch_html,
)


class _Resp:
    def __init__(self, text="", status=200):
        self.text = text
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")


def test_extract_prefers_title_tag_and_meta_description(acme_html):
    page = extract_page(acme_html)
    assert page.title == "Acme Widgets"
    assert page.description == "Acme builds precision widgets for industry."


def test_extract_strips_navigation_noise(acme_html):
    page = extract_page(acme_html)
    assert "Home About Contact" not in page.content
    assert "Copyright" not in page.content
    assert "tracking" not in page.content
    assert "Welcome to Acme Widgets" in page.content


def test_title_falls_back_to_h1_then_untitled():
    assert extract_page("<body><h1>Big Heading</h1></body>").title == "Big Heading"
    assert extract_page("<body><p>no headings here</p></body>").title == UNTITLED


def test_description_fallback_order():
    og = '<head><meta property="og:description" content="From OG"></head><body><p>Para</p></body>'
    assert extract_page(og).description == "From OG"

    both = (
        '<head><meta name="description" content="From meta">'
        '<meta property="og:description" content="From OG"></head>'
    )
    assert extract_page(both).description == "From meta"

    long_para = "<body><p>" + ("x" * 300) + "</p></body>"
    assert extract_page(long_para).description == "x" * 160

    assert extract_page("<body><div>nothing</div></body>").description == NO_DESCRIPTION


def test_blank_meta_description_falls_through():
    html = '<head><meta name="description" content="  "></head><body><p>Para text</p></body>'
    assert extract_page(html).description == "Para text"


def test_content_uses_first_matching_container_in_priority_order():
    html = """
    <body>
      <div class="container">container text</div>
      <div class="content">content text</div>
      <main>main text</main>
    </body>
    """
    assert extract_page(html).content == "main text"

    html = '<body><div class="container">container text</div><div class="content">content text</div></body>'
    assert extract_page(html).content == "content text"


def test_content_is_whitespace_collapsed_and_capped(settings):
    settings.CONTENT_MAX_CHARS = 50
    html = "<body><p>" + "word   \n\t " * 40 + "</p></body>"
    content = extract_page(html).content
    assert len(content) == 50
    assert "  " not in content


def test_fetch_html_sends_browser_user_agent(monkeypatch, settings):
    seen = {}

    def fake_get(url, timeout=None, headers=None):
        seen.update(url=url, timeout=timeout, headers=headers)
        return _Resp("<html></html>")

    monkeypatch.setattr("core.websites.extractors.requests.get", fake_get)
    assert fetch_html("https://www.acme.io") == "<html></html>"
    assert seen["timeout"] == settings.FETCH_TIMEOUT_SECONDS
    assert "Mozilla/5.0" in seen["headers"]["User-Agent"]


@pytest.mark.parametrize(
    "failure",
    [
        requests.Timeout("timed out"),
        requests.ConnectionError("Name or service not known"),
    ],
)
def test_fetch_html_wraps_transport_errors(monkeypatch, failure):
    def fake_get(*args, **kwargs):
        raise failure

    monkeypatch.setattr("core.websites.extractors.requests.get", fake_get)
    with pytest.raises(FetchError) as exc:
        fetch_html("https://www.acme.io")
    assert exc.value.__cause__ is failure
    assert exc.value.url == "https://www.acme.io"


def test_fetch_html_rejects_non_2xx(monkeypatch):
    monkeypatch.setattr("core.websites.extractors.requests.get", lambda *a, **k: _Resp("gone", status=404))
    with pytest.raises(FetchError) as exc:
        fetch_html("https://www.acme.io")
    assert "404" in exc.value.reason

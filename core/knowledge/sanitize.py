import re

# Helvetica as a standard Type1 font only carries WinAnsi (cp1252) glyphs.
PDF_TEXT_ENCODING = "cp1252"

_EMOJI = re.compile(
    "["
    "\U0001F000-\U0001FAFF"  # emoji, pictographs, flags, symbols & pictographs ext.
    "\U00002600-\U000027BF"  # misc symbols, dingbats
    "\U00002B00-\U00002BFF"  # arrows & misc symbols
    "\U0000FE00-\U0000FE0F"  # variation selectors
    "\U0000200D"             # zero width joiner
    "\U000020E3"             # combining enclosing keycap
    "]+"
)

_LINE_SEPARATORS = re.compile("\r\n|[\r\U00002028\U00002029]")

_TYPOGRAPHIC = {
    0x2010: "-",
    0x2011: "-",
    0x2012: "-",
    0x2013: "-",
    0x2014: "-",
    0x2015: "-",
    0x2018: "'",
    0x2019: "'",
    0x201A: "'",
    0x201B: "'",
    0x201C: '"',
    0x201D: '"',
    0x201E: '"',
    0x201F: '"',
    0x2022: "*",
    0x2026: "...",
}

# whatever is left of the General Punctuation block (odd spaces, zero-width marks, ...) plus NBSP
_GENERAL_PUNCTUATION = re.compile("[\U00002000-\U0000206F\U000000A0]")

_HORIZONTAL_WS = re.compile(r"[^\S\n]+")
_SPACE_AROUND_NEWLINE = re.compile(r" ?\n ?")
_NEWLINE_RUNS = re.compile(r"\n+")


def _encodable(text: str) -> str:
    return text.encode(PDF_TEXT_ENCODING, errors="ignore").decode(PDF_TEXT_ENCODING)


def sanitize_text(text: str) -> str:
    """
    Make arbitrary website text safe for the PDF's WinAnsi font.
    Idempotent: sanitize_text(sanitize_text(x)) == sanitize_text(x).
    """
    text = text or ""
    text = _EMOJI.sub("", text)
    text = _LINE_SEPARATORS.sub("\n", text)
    text = text.translate(_TYPOGRAPHIC)
    text = _GENERAL_PUNCTUATION.sub(" ", text)
    text = _encodable(text)

    text = _HORIZONTAL_WS.sub(" ", text)
    text = _SPACE_AROUND_NEWLINE.sub("\n", text)
    text = _NEWLINE_RUNS.sub("\n", text)
    return text.strip()

"""Low-level CSV helpers: encoding detection and quote-aware line splitting."""

UTF8_BOM = "\ufeff"


def detect_encoding(content: bytes) -> str:
    """Detect encoding of CSV content."""
    # Try UTF-8 first
    try:
        content.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    # Excel on Brazilian Windows exports cp1252
    try:
        content.decode("cp1252")
        return "cp1252"
    except UnicodeDecodeError:
        pass

    # latin-1 decodes any byte sequence
    return "latin-1"


def decode_csv(content: bytes) -> str:
    """Decode uploaded CSV bytes into text, dropping a leading BOM."""
    text = content.decode(detect_encoding(content))
    if text.startswith(UTF8_BOM):
        text = text[len(UTF8_BOM) :]
    return text


def split_csv_line(line: str, delimiter: str) -> list[str]:
    """
    Split one CSV line on ``delimiter``, ignoring delimiters inside quotes.

    A double quote toggles the "inside quotes" state and is kept in the
    field content; ``""`` escapes are not recognised. Fields are trimmed.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif char == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def strip_quotes(value: str) -> str:
    """Remove every double quote from a field and trim it."""
    return value.replace('"', "").strip()


def non_blank_lines(text: str) -> list[str]:
    """Split text on newlines and drop lines that are blank."""
    return [line for line in text.split("\n") if line.strip()]

"""
Single-line CSV tokenizer used by the bills and buckets decoders.
Quoted fields may contain the delimiter; a doubled quote inside quotes is a literal quote.
Malformed quoting never raises: an unterminated quote swallows the rest of the line.
"""
from typing import Iterable, List

QUOTE = '"'


def parse_line(line: str, delimiter: str = ",") -> List[str]:
    """Split one line into fields. N delimiters outside quotes always yield N+1 fields."""
    line = line.rstrip("\r\n")
    fields: List[str] = []
    buf: List[str] = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        c = line[i]
        if in_quotes:
            if c == QUOTE:
                if i + 1 < n and line[i + 1] == QUOTE:
                    # Escaped quote: consume both characters
                    buf.append(QUOTE)
                    i += 2
                    continue
                in_quotes = False
            else:
                buf.append(c)
        elif c == QUOTE:
            in_quotes = True
        elif c == delimiter:
            fields.append("".join(buf))
            buf = []
        else:
            buf.append(c)
        i += 1

    fields.append("".join(buf))
    return fields


def _needs_quoting(field: str, delimiter: str) -> bool:
    if not field:
        return False
    if delimiter in field or QUOTE in field or "\n" in field or "\r" in field:
        return True
    return field != field.strip()


def format_line(fields: Iterable[str], delimiter: str = ",") -> str:
    """Inverse of parse_line: quote fields that need it and double embedded quotes."""
    out = []
    for field in fields:
        field = "" if field is None else str(field)
        if _needs_quoting(field, delimiter):
            field = QUOTE + field.replace(QUOTE, QUOTE * 2) + QUOTE
        out.append(field)
    return delimiter.join(out)

import re
from dataclasses import dataclass

# {{ [!] expression [...] }}
PLACEHOLDER = re.compile(r'\{\{\s*(!)?\s*(.*?)\s*(\.\.\.)?\s*\}\}', re.DOTALL)


@dataclass(frozen=True)
class Placeholder:
    expression: str
    # `!`: show the bold "Name: " label before the value.
    prefix: bool = False
    # `...`: separate list items with commas instead of line breaks.
    spread: bool = False


def parse_placeholder(text: str) -> Placeholder | None:
    if not (m := PLACEHOLDER.fullmatch(text.strip())):
        return None
    return Placeholder(m[2], prefix=bool(m[1]), spread=bool(m[3]))

"""
Classification of free-text membership positions.

A position such as "소프라노 위원장" may name a vocal part, a job title, both or
neither. Tokens are found by substring containment, trying each vocabulary in
declaration order, so "부위원장" is matched before the shorter "위원장".
"""
from typing import NamedTuple, Optional

PARTS = ("소프라노", "알토", "테너", "베이스")
JOBS = ("부위원장", "위원장", "부장", "차장", "파트장", "솔리스트", "대장",
        "지휘자", "반주자", "총무", "회계", "서기", "대원")


class ParsedPosition(NamedTuple):
    part: str
    job: str


def _first_contained(vocabulary, text: str) -> str:
    return next((token for token in vocabulary if token in text), '')


def parse_position(position: Optional[str]) -> ParsedPosition:
    if not position:
        return ParsedPosition('', '')
    return ParsedPosition(_first_contained(PARTS, position), _first_contained(JOBS, position))


def format_position(part: Optional[str], job: Optional[str]) -> str:
    """Inverse of parse_position for form input: `("소프라노", "위원장")` -> `"소프라노 위원장"`."""
    return ' '.join(piece for piece in (part, job) if piece)

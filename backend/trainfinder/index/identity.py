import re
from typing import Optional

TRAIN_TYPES = ("ICE", "IC", "EC", "RE", "RB", "IRE", "TGV", "RJ", "NJ")

_TYPE_RE = re.compile(r"^(ICE|IC|EC|RE|RB|IRE|TGV|RJ|NJ)")
_NUMBER_RE = re.compile(r"[0-9]+")


def extract_train_number(label: Optional[str]) -> Optional[str]:
    """First whitespace-delimited all-digit token of the label, e.g. "ICE 513" -> "513"."""
    if not label:
        return None
    for part in label.split():
        if _NUMBER_RE.fullmatch(part):
            return part
    return None


def extract_train_type(label: Optional[str]) -> Optional[str]:
    if not label:
        return None
    m = _TYPE_RE.match(label.upper())
    return m.group(1) if m else None


def digits_only(value: str) -> str:
    return re.sub(r"[^0-9]", "", value)

import re

HEX_COLOR_RE = re.compile(r'#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})')


def validate(raw):
    """Normalize a hex color to lowercase #rrggbb, or return None if rejected.

    Accepts '#rgb' and '#rrggbb' in any case. Anything else (missing '#',
    wrong length, non-hex digits, empty string, None, non-strings) is rejected.
    """
    if not isinstance(raw, str):
        return None

    match = HEX_COLOR_RE.fullmatch(raw.strip())
    if not match:
        return None

    digits = match.group(1).lower()
    if len(digits) == 3:
        digits = ''.join(ch * 2 for ch in digits)
    return f'#{digits}'
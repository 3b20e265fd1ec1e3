"""Counter normalization for swanctl traffic lines."""

INT64_MAX = 2**63 - 1


def parse_count(token: str) -> int:
    """Convert a grouped decimal token (e.g. '1,234,567') into an int.

    Commas are stripped first, then the leading run of digits is consumed;
    anything after the first non-digit is ignored. Empty or non-numeric input
    yields 0. Values beyond the signed 64-bit range saturate at INT64_MAX.
    """
    n = 0
    for ch in token.replace(",", ""):
        if ch < "0" or ch > "9":
            break
        n = n * 10 + (ord(ch) - 48)
        if n > INT64_MAX:
            return INT64_MAX
    return n

import re
import secrets


# Custom codes: 3 to 10 ASCII letters or digits
CODE_PATTERN = re.compile(r"[A-Za-z0-9]{3,10}")


def generate_code(length: int = 6) -> str:
    """
    Generate a random short code of lowercase hex digits.

    Args:
        length: Number of characters (rounded down to an even number)

    Returns:
        A random code such as ``"9f2c1a"``

    Note:
        Uniqueness is not checked here. A collision is rejected by the
        database when the link is inserted and reported as a duplicate.
        6 chars: 16^6 = 16,777,216 combinations
    """
    return secrets.token_hex(length // 2)


def is_valid_code(code) -> bool:
    """Check that a caller-supplied code is 3-10 letters or digits."""
    if not isinstance(code, str):
        return False
    return CODE_PATTERN.fullmatch(code) is not None

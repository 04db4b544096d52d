"""
Random paste identifier generation.
"""
import secrets
import string

# URL-safe alphabet: letters, digits, "_" and "-"
ALPHABET = string.ascii_letters + string.digits + "_-"
ID_LENGTH = 10


def generate_paste_id(length: int = ID_LENGTH) -> str:
    """
    Generate a random paste identifier.

    Uses the `secrets` module so identifiers cannot be guessed from earlier
    ones. Collisions are not checked for; with 64 ** 10 possible values they
    are treated as negligible.

    Returns:
        str: An identifier like "V1StGXR8_Z"
    """
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def is_valid_paste_id(paste_id: str) -> bool:
    """True if paste_id has the shape generate_paste_id() produces."""
    return len(paste_id) == ID_LENGTH and all(c in ALPHABET for c in paste_id)

import secrets
import string


_ALPHABET = string.ascii_uppercase + string.digits


def generate_confirmation_code(*, prefix: str = 'CONF-', length: int = 8) -> str:
    """Customer-facing code such as CONF-7K2QX9AB; uniqueness is enforced by the ledger."""
    return prefix + ''.join(secrets.choice(_ALPHABET) for _ in range(length))

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def normalize_identity(value: str | None) -> str | None:
    """Return the canonical form of a wallet identity, or None for the null identity."""
    if value is None:
        return None
    identity = value.strip().lower()
    if not identity or identity == ZERO_ADDRESS:
        return None
    return identity

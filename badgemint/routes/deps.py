from fastapi import Header, HTTPException

from badgemint.core.identity import normalize_identity


def get_caller(x_wallet_address: str | None = Header(default=None)) -> str:
    """Identity of the connected wallet, as supplied by the wallet gateway."""
    caller = normalize_identity(x_wallet_address)
    if caller is None:
        raise HTTPException(status_code=401, detail="X-Wallet-Address header is required")
    return caller

"""Thread-safe page bookkeeping: claimable bit masks, claim ledgers, page tokens, page sizes and adrift markers."""

__version__ = "0.1.0"
__all__ = ["adrift", "bitmask", "huge_foreign", "ledger", "page_tokens", "pages"]
def clamp_limit(limit: int | None, default: int = 10, max_: int = 100) -> int:
    """Bound a client-supplied page size to 1..max_; None means `default`."""
    if limit is None:
        return default
    return min(max(limit, 1), max_)

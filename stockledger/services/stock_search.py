from datetime import date


def search_stock_items(items, search_term="", category=None):
    """Case-insensitive name match with an optional category, newest changes first."""
    term = (search_term or "").strip().lower()
    category = (category or "").strip() or None

    matches = [
        item for item in items
        if (not term or term in (item.name or "").lower())
        and (category is None or item.category == category)
    ]
    return sorted(matches, key=lambda item: item.last_updated or date.min, reverse=True)

from slugify import slugify as python_slugify


def slugify(text: str) -> str:
    """Generate URL-friendly slug"""
    return python_slugify(text)


def unique_slug(model, text: str, exclude_id: int = None) -> str:
    """Slug for `text` that is not yet used by another `model` row"""
    slug = slugify(text)
    base_slug = slug
    counter = 1
    while True:
        existing = model.query.filter_by(slug=slug).first()
        if not existing or existing.id == exclude_id:
            return slug
        slug = f"{base_slug}-{counter}"
        counter += 1


def parse_bool_arg(value, default: bool = True) -> bool:
    """Interpret a query-string flag ('true'/'false'/'1'/'0')"""
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes")

from marshmallow import fields, ValidationError

from gamava.models.main_menu import BANNER_SLOTS


class BannerImages(fields.Field):
    """Fixed-size list of banner image URLs; missing slots are padded with ''"""

    def __init__(self, slots: int = BANNER_SLOTS, **kwargs):
        self.slots = slots
        super().__init__(**kwargs)

    def _deserialize(self, value, attr, data, **kwargs):
        if not isinstance(value, (list, tuple)):
            raise ValidationError("Banner images must be a list.")
        if len(value) > self.slots:
            raise ValidationError(f"At most {self.slots} banner images are allowed.")

        images = []
        for item in value:
            if item is None:
                item = ""
            if not isinstance(item, str):
                raise ValidationError("Banner images must be strings.")
            images.append(item.strip())
        return images + [""] * (self.slots - len(images))

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return list(value)


class OrderedIdList(fields.Field):
    """Ordered list of positive integer ids. Duplicates are dropped, first occurrence wins."""

    def _deserialize(self, value, attr, data, **kwargs):
        if not isinstance(value, (list, tuple)):
            raise ValidationError("Must be a list of ids.")

        ids = []
        seen = set()
        for item in value:
            if isinstance(item, bool):
                raise ValidationError(f"Invalid id: {item!r}")
            try:
                item_id = int(item)
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid id: {item!r}")
            if item_id < 1 or (isinstance(item, float) and item != item_id):
                raise ValidationError(f"Invalid id: {item!r}")
            if item_id not in seen:
                seen.add(item_id)
                ids.append(item_id)
        return ids

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return list(value)

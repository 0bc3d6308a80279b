from marshmallow import Schema, fields, validate, EXCLUDE
from gamava.enums import UserRole, MainMenuDisplayType
from gamava.schemas.custom_fields import BannerImages, OrderedIdList

DISPLAY_TYPES = [t.value for t in MainMenuDisplayType]


class UserRegisterSchema(Schema):
    email = fields.Email(required=True)
    username = fields.Str(required=True, validate=validate.Length(min=3, max=100))
    password = fields.Str(required=True, validate=validate.Length(min=6))
    full_name = fields.Str(validate=validate.Length(max=255))
    role = fields.Str(
        load_default=UserRole.CUSTOMER.value,
        validate=validate.OneOf([UserRole.CUSTOMER.value]),
    )


class UserLoginSchema(Schema):
    username = fields.Str(required=True)
    password = fields.Str(required=True)


class CategoryCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    slug = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    parent_id = fields.Int(allow_none=True)
    icon = fields.Str(allow_none=True)
    banner = fields.Str(allow_none=True)
    description = fields.Str(allow_none=True)
    sub_description = fields.Str(allow_none=True)
    link = fields.Str(allow_none=True)
    order_position = fields.Int(load_default=0)
    status = fields.Bool(load_default=True)
    show_in_main_menu = fields.Bool(load_default=False)
    category_image = fields.Str(allow_none=True)
    main_menu_display_type = fields.Str(
        load_default=MainMenuDisplayType.PRODUCTS.value,
        validate=validate.OneOf(DISPLAY_TYPES),
    )
    main_menu_description = fields.Str(allow_none=True)
    popular_products = OrderedIdList(load_default=list)


class CategoryUpdateSchema(Schema):
    """Every key is optional; a key that is absent leaves the column unchanged"""

    class Meta:
        unknown = EXCLUDE

    name = fields.Str(allow_none=True, validate=validate.Length(min=1, max=255))
    slug = fields.Str(allow_none=True, validate=validate.Length(min=1, max=255))
    parent_id = fields.Int(allow_none=True)
    icon = fields.Str(allow_none=True)
    banner = fields.Str(allow_none=True)
    description = fields.Str(allow_none=True)
    sub_description = fields.Str(allow_none=True)
    link = fields.Str(allow_none=True)
    order_position = fields.Int(allow_none=True)
    status = fields.Bool(allow_none=True)
    show_in_main_menu = fields.Bool(allow_none=True)
    category_image = fields.Str(allow_none=True)
    main_menu_display_type = fields.Str(
        allow_none=True, validate=validate.OneOf(DISPLAY_TYPES)
    )
    main_menu_description = fields.Str(allow_none=True)
    popular_products = OrderedIdList(allow_none=True)


class CategoryRefSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.Int(required=True)


class CategoryReorderSchema(Schema):
    categories = fields.List(fields.Nested(CategoryRefSchema), required=True)


class PopularProductsSchema(Schema):
    category_id = fields.Int(required=True, data_key="categoryId")
    product_ids = OrderedIdList(required=True, data_key="productIds")


class CategoryProductsSchema(Schema):
    product_ids = OrderedIdList(
        required=True, data_key="productIds", validate=validate.Length(min=1)
    )


class MainMenuItemUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    slug = fields.Str(required=True, validate=validate.Length(min=1))
    category_image = fields.Str(allow_none=True)
    banner_images = BannerImages(allow_none=True)
    main_menu_display_type = fields.Str(
        allow_none=True, validate=validate.OneOf(DISPLAY_TYPES)
    )
    main_menu_description = fields.Str(allow_none=True)


class ProductCreateSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    description = fields.Str()
    price = fields.Decimal(required=True, places=2, validate=validate.Range(min=0))
    images_cover_url = fields.Str(validate=validate.Length(max=500))
    platform = fields.Str(validate=validate.Length(max=100))
    kinguin_id = fields.Int()


class ProductCategoriesSchema(Schema):
    product_id = fields.Int(required=True, data_key="productId")
    category_ids = OrderedIdList(required=True, data_key="categoryIds")

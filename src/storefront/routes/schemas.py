from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate


class ProductIdField(fields.Field):
    """Opaque product identifier: an int or a non-empty string"""

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise ValidationError("Must be an integer or a string.")
        if isinstance(value, str) and not value:
            raise ValidationError("Must not be empty.")
        return value


class SizeField(fields.Field):
    """Variant size; null means the product has no size options"""

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise ValidationError("Must be an integer or a string.")
        return value


class LoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Str(required=True, validate=validate.Length(min=1))
    password = fields.Str(required=True, validate=validate.Length(min=1))


class UpdateCredentialsSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    current_password = fields.Str(data_key="currentPassword", load_default=None)
    email = fields.Str(load_default=None)
    password = fields.Str(load_default=None, validate=validate.Length(max=128))


class ProductSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    id = ProductIdField(required=True)
    name = fields.Str(required=True, validate=validate.Length(min=1))
    price = fields.Decimal(required=True, validate=validate.Range(min=0))
    promotion = fields.Decimal(load_default=0, validate=validate.Range(min=0, max=100))
    banner = fields.Str(load_default=None, allow_none=True)


class AddCartItemSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    product = fields.Nested(ProductSchema, required=True)
    quantity = fields.Int(required=True, strict=True, validate=validate.Range(min=1, max=99))
    selected_size = SizeField(data_key="selectedSize", load_default=None, allow_none=True)


class CartItemKeySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    id = ProductIdField(required=True)
    selected_size = SizeField(data_key="selectedSize", load_default=None, allow_none=True)


class UpdateCartItemSchema(CartItemKeySchema):
    # 0 or less removes the item
    quantity = fields.Int(required=True, strict=True, validate=validate.Range(max=99))


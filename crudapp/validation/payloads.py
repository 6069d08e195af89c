"""Declared rule sets for every payload shape accepted by the API."""

from __future__ import annotations

import re

from crudapp.db.models.order import ORDER_STATUSES
from crudapp.db.models.todo import TODO_STATUSES
from crudapp.db.models.user import USER_ROLES
from crudapp.validation.rules import ALPHANUMERIC_PATTERN
from crudapp.validation.rules import EMAIL_PATTERN
from crudapp.validation.rules import MIXED_CASE_DIGIT_PATTERN
from crudapp.validation.rules import FieldRule
from crudapp.validation.rules import boolean_rule
from crudapp.validation.rules import date_rule
from crudapp.validation.rules import number_rule
from crudapp.validation.rules import string_rule

IMAGE_URL_PATTERN = re.compile(r"^https?://.*\.(?:png|jpg|jpeg|gif|webp)$", re.IGNORECASE)

# Column limits (VARCHAR lengths, Numeric precision and Integer range).
EMAIL_MAX_LENGTH = 255
CREATED_BY_MAX_LENGTH = 64
PRODUCT_NAME_MAX_LENGTH = 255
SKU_MAX_LENGTH = 64
IMAGE_URL_MAX_LENGTH = 2048
MAX_PRICE = 9_999_999_999.99
MAX_QUANTITY = 2_147_483_647


def _email_rule() -> FieldRule:
    return string_rule(
        "email",
        empty_message="Email cannot be empty.",
        max_len=EMAIL_MAX_LENGTH,
        max_message=f"Email must not exceed {EMAIL_MAX_LENGTH} characters.",
        pattern=EMAIL_PATTERN,
        pattern_message="Invalid email.",
        lower=True,
    )


def _username_rule() -> FieldRule:
    return string_rule(
        "username",
        empty_message="Username cannot be empty.",
        min_len=3,
        min_message="Username must have at least 3 characters.",
        max_len=30,
        max_message="Username must not exceed 30 characters.",
        pattern=ALPHANUMERIC_PATTERN,
        pattern_message="Username can only contain letters and numbers.",
    )


def _password_rule(*, strength: bool, field: str = "password", label: str = "Password") -> FieldRule:
    return string_rule(
        field,
        empty_message=f"{label} cannot be empty.",
        min_len=8,
        min_message=f"{label} must have at least 8 characters.",
        max_len=32,
        max_message=f"{label} must not exceed 32 characters.",
        pattern=MIXED_CASE_DIGIT_PATTERN if strength else None,
        pattern_message=(
            f"{label} must include at least one lowercase letter, one uppercase letter, and one digit."
        ),
    )


def _role_rule(*, required: bool) -> FieldRule:
    return string_rule(
        "role",
        required=required,
        empty_message="Invalid role.",
        choices=USER_ROLES,
        choices_message="Invalid role.",
    )


REGISTRATION_RULES: tuple[FieldRule, ...] = (
    _email_rule(),
    _username_rule(),
    _password_rule(strength=True),
)

# Account creation by an administrator may also set the role and verification flag.
ADMIN_USER_CREATE_RULES: tuple[FieldRule, ...] = (
    *REGISTRATION_RULES,
    _role_rule(required=False),
    boolean_rule("isVerified", message="isVerified must be a boolean."),
)

ROLE_CHANGE_RULES: tuple[FieldRule, ...] = (_role_rule(required=True),)

LOGIN_RULES: tuple[FieldRule, ...] = (
    _email_rule(),
    _password_rule(strength=False),
)

PROFILE_UPDATE_RULES: tuple[FieldRule, ...] = (_username_rule(),)

PASSWORD_CHANGE_RULES: tuple[FieldRule, ...] = (
    string_rule("oldPassword", empty_message="Old password and new password are required."),
    _password_rule(strength=True, field="newPassword", label="New password"),
)

TODO_RULES: tuple[FieldRule, ...] = (
    string_rule(
        "title",
        empty_message="Title cannot be empty",
        trim=True,
        min_len=3,
        min_message="Title must be at least 3 characters long",
        max_len=255,
        max_message="Title must not exceed 255 characters",
    ),
    string_rule(
        "description",
        required=False,
        type_message="Description must be a string",
        allow_blank=True,
    ),
    string_rule(
        "status",
        required=False,
        empty_message="Status must be either pending, in_progress or completed",
        choices=TODO_STATUSES,
        choices_message="Status must be either pending, in_progress or completed",
    ),
    date_rule("dueDate", message="Due date must be a valid date"),
    string_rule(
        "createdBy",
        required=False,
        empty_message="Created by cannot be empty",
        trim=True,
        max_len=CREATED_BY_MAX_LENGTH,
        max_message=f"Created by must not exceed {CREATED_BY_MAX_LENGTH} characters",
    ),
)


def _post_rules(*, partial: bool) -> tuple[FieldRule, ...]:
    required = not partial
    return (
        string_rule(
            "title",
            required=required,
            empty_message="Title cannot be empty",
            trim=True,
            min_len=3,
            min_message="Title must be at least 3 characters long",
            max_len=255,
            max_message="Title must not exceed 255 characters",
        ),
        string_rule(
            "content",
            required=required,
            empty_message="Content cannot be empty",
            trim=True,
            min_len=10,
            min_message="Content must be at least 10 characters long",
        ),
        string_rule(
            "author",
            required=required,
            empty_message="Author cannot be empty",
            trim=True,
        ),
        boolean_rule("status", message="Status must be a boolean"),
    )


POST_CREATE_RULES = _post_rules(partial=False)
POST_UPDATE_RULES = _post_rules(partial=True)


def _image_rule(field: str, label: str) -> FieldRule:
    message = f"{label} must be a valid image URL (.jpg, .png, .gif, .webp)."
    return string_rule(
        field,
        required=False,
        empty_message=message,
        trim=True,
        max_len=IMAGE_URL_MAX_LENGTH,
        max_message=f"{label} must not exceed {IMAGE_URL_MAX_LENGTH} characters.",
        pattern=IMAGE_URL_PATTERN,
        pattern_message=message,
    )


PRODUCT_RULES: tuple[FieldRule, ...] = (
    string_rule(
        "name",
        empty_message="Product name is required and must be a valid string.",
        trim=True,
        max_len=PRODUCT_NAME_MAX_LENGTH,
        max_message=f"Product name must not exceed {PRODUCT_NAME_MAX_LENGTH} characters.",
    ),
    string_rule(
        "description",
        required=False,
        type_message="Description must be a string.",
        allow_blank=True,
    ),
    string_rule(
        "sku",
        empty_message="SKU is required and must be a valid string.",
        trim=True,
        max_len=SKU_MAX_LENGTH,
        max_message=f"SKU must not exceed {SKU_MAX_LENGTH} characters.",
        lower=True,
    ),
    number_rule(
        "price",
        message="Price must be a positive number.",
        minimum=0,
        maximum=MAX_PRICE,
        places=2,
    ),
    number_rule(
        "quantity",
        message="Quantity must be a positive number.",
        integer=True,
        minimum=0,
        maximum=MAX_QUANTITY,
    ),
    _image_rule("thumbnail", "Thumbnail"),
    _image_rule("image", "Image"),
)

CART_ITEM_RULES: tuple[FieldRule, ...] = (
    string_rule("productId", empty_message="Product id is required.", trim=True),
    number_rule(
        "quantity",
        message="Quantity must be a positive integer.",
        integer=True,
        minimum=1,
        maximum=MAX_QUANTITY,
    ),
)

CART_QUANTITY_RULES: tuple[FieldRule, ...] = (
    number_rule(
        "quantity",
        message="Quantity must be a non-negative number.",
        integer=True,
        minimum=0,
        maximum=MAX_QUANTITY,
    ),
)

PRICING_RULES: tuple[FieldRule, ...] = (
    number_rule(
        "discount",
        required=False,
        message="Discount must be a number between 0 and 1.",
        minimum=0,
        maximum=1,
        places=4,
    ),
    number_rule(
        "taxRate",
        required=False,
        message="Tax rate must be a number between 0 and 1.",
        minimum=0,
        maximum=1,
        places=4,
    ),
    number_rule(
        "shippingFee",
        required=False,
        message="Shipping fee must be a non-negative number.",
        minimum=0,
        maximum=MAX_PRICE,
        places=2,
    ),
)

ORDER_STATUS_RULES: tuple[FieldRule, ...] = (
    string_rule(
        "status",
        empty_message="Invalid status. Valid statuses are: processing, delivered, cancelled.",
        choices=ORDER_STATUSES,
        choices_message="Invalid status. Valid statuses are: processing, delivered, cancelled.",
    ),
)

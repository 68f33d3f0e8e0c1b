"""User and device resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class UserSchema(Schema):
    """Public representation of a user."""

    id = fields.Integer(required=True)
    name = fields.String(required=True)
    email = fields.String(allow_none=True)
    activated = fields.Boolean(required=True)


class DeviceSchema(Schema):
    """Registered device, without its tokens."""

    device_id = fields.Integer(required=True)
    name = fields.String(required=True)
    signature = fields.String()
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)

"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class RegisterSchema(Schema):
    """Input payload for local account registration."""

    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))


class LoginSchema(Schema):
    """Input payload for authenticating with a password."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class TokenPairSchema(Schema):
    """Response payload carrying a freshly issued token pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    device_id = fields.Integer(required=True)
    token_type = fields.String(dump_default="bearer")


class WhoAmISchema(Schema):
    """Claims of the access token the request was authorized with."""

    user_id = fields.Integer(required=True)
    name = fields.String(allow_none=True)
    email = fields.String(allow_none=True)
    device_id = fields.Integer(required=True)


class TokenCheckSchema(Schema):
    """Outcome of a token check."""

    decision = fields.String(required=True)
    rotated = fields.Boolean(required=True)
    device_id = fields.Integer(allow_none=True)
    claims = fields.Dict(keys=fields.String())


class EmailSchema(Schema):
    """Input payload naming an account by email."""

    email = fields.Email(required=True, validate=validate.Length(max=254))


class SecurityCodeSchema(Schema):
    """Input payload presenting an activation or password reset code."""

    credentials_id = fields.Integer(required=True, validate=validate.Range(min=1))
    code = fields.String(required=True, validate=validate.Length(min=1, max=64))


class PasswordResetSchema(SecurityCodeSchema):
    """Input payload setting a new password with a reset code."""

    password = fields.String(required=True, validate=validate.Length(min=8, max=128))


class CodeIssuedSchema(Schema):
    """Acknowledgement of an issued code. The code itself is never echoed."""

    credentials_id = fields.Integer(required=True)
    expires_at = fields.DateTime(required=True)

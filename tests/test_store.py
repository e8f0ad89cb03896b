"""Tests for modkit.store -- record type builder and registry."""

from __future__ import annotations

import pytest

from modkit.exceptions import ExtensionError
from modkit.store import RecordType, RecordTypeBuilder, RecordTypeRegistry, camel_case


def _hash_password(record: dict) -> dict:
    return {**record, "password": "hashed"}


class TestCamelCase:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("User", "user"),
            ("UserProfile", "userProfile"),
            ("user_profile", "userProfile"),
            ("user", "user"),
            ("APIKey", "apiKey"),
        ],
    )
    def test_conversion(self, name: str, expected: str) -> None:
        assert camel_case(name) == expected


class TestRecordTypeBuilder:
    def test_builds_immutable_record_type(self) -> None:
        record_type = (
            RecordTypeBuilder("UserProfile")
            .field("email", str)
            .field("roles", list)
            .input_hook(_hash_password)
            .build()
        )
        assert record_type.name == "userProfile"
        assert dict(record_type.fields) == {"email": str, "roles": list}
        assert record_type.input_hook is _hash_password
        assert record_type.output_hook is None

        with pytest.raises(TypeError):
            record_type.fields["other"] = int  # type: ignore[index]

    def test_explicit_record_type_name(self) -> None:
        record_type = RecordTypeBuilder("User", record_type_name="accounts").build()
        assert record_type.name == "accounts"

    def test_build_snapshots_fields(self) -> None:
        builder = RecordTypeBuilder("User").field("a", int)
        first = builder.build()
        builder.field("b", int)
        assert list(first.fields) == ["a"]

    def test_output_hook(self) -> None:
        record_type = RecordTypeBuilder("User").output_hook(dict).build()
        assert record_type.output_hook is dict


class TestRecordTypeRegistry:
    def test_register_and_get(self) -> None:
        registry = RecordTypeRegistry()
        user = RecordTypeBuilder("User").field("email", str).build()
        registry.register(user)

        assert "user" in registry
        assert len(registry) == 1
        assert registry.get("user") is user

    def test_duplicate_name_raises(self) -> None:
        registry = RecordTypeRegistry()
        registry.register(RecordType(name="user", fields={}))
        with pytest.raises(ExtensionError, match="already registered"):
            registry.register(RecordType(name="user", fields={}))

    def test_get_unknown_raises(self) -> None:
        with pytest.raises(ExtensionError, match="not registered"):
            RecordTypeRegistry().get("missing")

    def test_definitions_and_hooks(self) -> None:
        registry = RecordTypeRegistry()
        registry.register(
            RecordTypeBuilder("User").field("email", str).input_hook(_hash_password).build()
        )
        registry.register(RecordTypeBuilder("Post").field("title", str).build())

        assert registry.definitions() == {"user": {"email": str}, "post": {"title": str}}
        assert registry.hooks() == {
            "user": (_hash_password, None),
            "post": (None, None),
        }

"""Unit tests for the kind registry."""

from __future__ import annotations

from typing import Any

import pytest

from kindpack import (
    PACKED_ARRAY,
    PACKED_OBJECT,
    CodecOptions,
    KindRegistry,
    RegistryError,
    UnsupportedTypeError,
    decode,
    decode_array,
    decode_object,
    decode_value,
    encode,
)


def _decode_one(data: memoryview, **kwargs: Any) -> tuple[Any, int]:
    return "one", 1


def _decode_other(data: memoryview, **kwargs: Any) -> tuple[Any, int]:
    return "other", 1


class TestRegistration:
    """Test registering decoders."""

    def test_register_and_resolve(self) -> None:
        """Test a registered decoder can be looked up."""
        registry = KindRegistry()
        registry.register(0x10, _decode_one)

        assert 0x10 in registry
        assert 0x11 not in registry
        assert len(registry) == 1
        assert registry.resolve_decoder(0x10) is _decode_one
        assert registry.resolve_decoder(0x11) is None

    def test_kinds_sorted(self) -> None:
        """Test kinds() and iteration are in ascending order."""
        registry = KindRegistry()
        registry.register(0x30, _decode_one)
        registry.register(0x05, _decode_other)
        assert registry.kinds() == [0x05, 0x30]
        assert list(registry) == [0x05, 0x30]

    @pytest.mark.parametrize(
        "kind",
        [-1, 0xFD, 0x100, 0x50, 0x53, 0x55, PACKED_OBJECT, PACKED_ARRAY, True, "a", 1.0],
    )
    def test_invalid_kinds(self, kind: Any) -> None:
        """Test out-of-range, reserved and structural kinds."""
        with pytest.raises(RegistryError):
            KindRegistry().register(kind, _decode_one)

    def test_registry_error_is_value_error(self) -> None:
        """Test RegistryError can be caught as ValueError."""
        with pytest.raises(ValueError):
            KindRegistry().register(0x50, _decode_one)

    def test_conflicting_registration(self) -> None:
        """Test a kind cannot be rebound to a different decoder."""
        registry = KindRegistry()
        registry.register(0x10, _decode_one)
        with pytest.raises(RegistryError, match="already registered"):
            registry.register(0x10, _decode_other)

    def test_same_decoder_is_noop(self) -> None:
        """Test registering the same decoder twice."""
        registry = KindRegistry()
        registry.register(0x10, _decode_one)
        registry.register(0x10, _decode_one)
        assert len(registry) == 1

    def test_names(self) -> None:
        """Test display names default to the decoder's qualified name."""
        registry = KindRegistry()
        registry.register(0x10, _decode_one)
        registry.register(0x11, _decode_other, name="Other")
        assert registry.name_of(0x10) == "_decode_one"
        assert registry.describe(0x11) == "0x11 (Other)"
        assert registry.describe(0x12) == "0x12"


class TestRecordRegistration:
    """Test registering ExtensionRecord classes."""

    def test_register_record(self, point_type: Any) -> None:
        """Test a record registers under its own kind and name."""
        registry = KindRegistry()
        registry.register_record(point_type)
        assert point_type.kind in registry
        assert registry.name_of(point_type.kind) == "Point"

    def test_register_record_twice(self, point_type: Any) -> None:
        """Test re-registering the same record class is a no-op."""
        registry = KindRegistry()
        registry.register_record(point_type)
        registry.register_record(point_type)
        assert len(registry) == 1

    def test_record_without_kind(self) -> None:
        """Test classes that declare no kind."""

        class NoKind:
            @classmethod
            def from_bytes(cls, data: Any, registry: Any = None, **kwargs: Any) -> tuple[Any, int]:
                return cls(), 1

        with pytest.raises(RegistryError, match="no kind"):
            KindRegistry().register_record(NoKind)  # type: ignore[arg-type]

    def test_record_kind_conflict(self, point_type: Any) -> None:
        """Test a record cannot take a kind bound to another decoder."""
        registry = KindRegistry()
        registry.register(point_type.kind, _decode_one)
        with pytest.raises(RegistryError):
            registry.register_record(point_type)


class TestIndependentRegistries:
    """Test registries are isolated from each other."""

    def test_separate_universes(self, point_type: Any, point_registry: KindRegistry) -> None:
        """Test the same bytes decode under one registry and not another."""
        data = encode([point_type(1, 2)])
        other = KindRegistry()
        other.register(0x41, _decode_one)

        assert decode(data, registry=point_registry)[0] == [point_type(1, 2)]
        with pytest.raises(UnsupportedTypeError):
            decode(data, registry=other)

    def test_same_kind_different_meaning(self) -> None:
        """Test two registries can bind one kind to different decoders."""
        first = KindRegistry()
        first.register(0x10, _decode_one)
        second = KindRegistry()
        second.register(0x10, _decode_other)

        data = bytes.fromhex("21010110")
        assert decode(data, registry=first)[0] == ["one"]
        assert decode(data, registry=second)[0] == ["other"]


class TestRegistryAndOptions:
    """Test registries against custom structural kinds."""

    def test_structural_kind_registered_as_extension(self, point_registry: KindRegistry) -> None:
        """Test a registered kind reused as a packed container kind is refused."""
        options = CodecOptions(packed_array_kind=0x40)
        data = encode([], options)

        with pytest.raises(RegistryError, match="packed containers"):
            decode(data, registry=point_registry, options=options)
        with pytest.raises(RegistryError):
            decode_array(data, registry=point_registry, options=options)
        with pytest.raises(RegistryError):
            decode_object(encode({}, options), registry=point_registry, options=options)

    def test_same_options_without_registry(self) -> None:
        """Test the options alone are still usable."""
        options = CodecOptions(packed_array_kind=0x40)
        assert decode(encode([], options), options=options) == ([], 3)

    def test_check_structural_kinds(self, point_registry: KindRegistry) -> None:
        """Test the check names the clashing kind."""
        point_registry.check_structural_kinds({PACKED_OBJECT, PACKED_ARRAY})
        with pytest.raises(RegistryError, match="0x40"):
            point_registry.check_structural_kinds({PACKED_OBJECT, 0x40})

    def test_disjoint_custom_kinds(self, point_type: Any, point_registry: KindRegistry) -> None:
        """Test custom structural kinds next to registered extension kinds."""
        options = CodecOptions(packed_object_kind=0x30, packed_array_kind=0x31)
        data = encode([point_type(1, 2), {"a": 1}], options)
        assert decode_value(data, registry=point_registry, options=options) == [
            point_type(1, 2),
            {"a": 1},
        ]

# tests/test_unions.py
"""Tests for DiscriminatedUnionBuilder."""

REF = "#/components/schemas/"


class TestDiscriminatedUnionBuilder:

    def test_one_of_follows_variant_order(self):
        from typesynth.descriptors import TypeDescriptor
        from typesynth.schemas import DiscriminatedUnionBuilder

        entry = DiscriminatedUnionBuilder().build(
            [TypeDescriptor(name="B"), TypeDescriptor(name="A")]
        )
        assert entry.to_dict() == {
            "oneOf": [{"$ref": REF + "B"}, {"$ref": REF + "A"}],
            "discriminator": {"propertyName": "type", "mapping": {"B": REF + "B", "A": REF + "A"}},
        }

    def test_custom_property_and_description(self):
        from typesynth.descriptors import TypeDescriptor
        from typesynth.schemas import DiscriminatedUnionBuilder

        entry = DiscriminatedUnionBuilder().build([TypeDescriptor(name="A")], "kind", "Alternatives")
        assert entry.discriminator.property_name == "kind"
        assert entry.description == "Alternatives"

    def test_nameless_variants_skipped(self):
        from typesynth.descriptors import TypeDescriptor
        from typesynth.schemas import DiscriminatedUnionBuilder

        entry = DiscriminatedUnionBuilder().build([TypeDescriptor(), TypeDescriptor(name="A")])
        assert [r.name for r in entry.one_of] == ["A"]
        assert list(entry.discriminator.mapping) == ["A"]

    def test_duplicate_names_overwrite_mapping(self):
        from typesynth.descriptors import TypeDescriptor
        from typesynth.schemas import DiscriminatedUnionBuilder

        entry = DiscriminatedUnionBuilder().build(
            [TypeDescriptor(name="A", description="one"), TypeDescriptor(name="A", description="two")]
        )
        assert len(entry.one_of) == 2
        assert entry.discriminator.mapping == {"A": REF + "A"}

    def test_empty_variants(self):
        from typesynth.schemas import DiscriminatedUnionBuilder

        entry = DiscriminatedUnionBuilder().build([])
        assert entry.to_dict() == {"oneOf": [], "discriminator": {"propertyName": "type", "mapping": {}}}

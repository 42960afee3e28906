"""Tests for canonical type-name translation."""

import pytest

from galalith.generator import cpp, typescript
from galalith.generator.errors import RegistryError
from galalith.generator.naming import TypeNameDialect, translate


def describe_translate():
    def describe_cpp():
        @pytest.mark.parametrize(
            "canonical, expected",
            [
                ("boolean", "bool"),
                ("java.lang.Boolean", "bool"),
                ("byte", "int8_t"),
                ("Short", "int16_t"),
                ("int", "int32_t"),
                ("java.lang.Integer", "int32_t"),
                ("long", "int64_t"),
                ("Float", "float"),
                ("double", "double"),
                ("Character", "char"),
                ("java.lang.String", "string"),
            ],
        )
        def maps_primitives(expect, canonical, expected):
            expect(translate(canonical, cpp.DIALECT)) == expected

        def maps_containers(expect):
            expect(translate("java.util.List<java.lang.Integer>", cpp.DIALECT)) == "list<int32_t>"
            expect(translate("Set<String>", cpp.DIALECT)) == "set<string>"
            expect(translate("Map<Integer, String>", cpp.DIALECT)) == "map<int32_t, string>"

        def maps_nested_containers(expect):
            expect(
                translate("Map<Integer, List<Set<Long>>>", cpp.DIALECT)
            ) == "map<int32_t, list<set<int64_t>>>"

        def maps_arrays_to_vectors(expect):
            expect(translate("int[]", cpp.DIALECT)) == "vector<int32_t>"
            expect(translate("long[][]", cpp.DIALECT)) == "vector<vector<int64_t>>"

        def keeps_message_names(expect):
            expect(translate("com.game.packet.ObjectA", cpp.DIALECT)) == "ObjectA"
            expect(translate("List<com.game.ObjectA>", cpp.DIALECT)) == "list<ObjectA>"

    def describe_typescript():
        @pytest.mark.parametrize(
            "canonical, expected",
            [
                ("boolean", "boolean"),
                ("Boolean", "boolean"),
                ("byte", "number"),
                ("short", "number"),
                ("Integer", "number"),
                ("long", "number"),
                ("float", "number"),
                ("Double", "number"),
                ("char", "string"),
                ("String", "string"),
            ],
        )
        def maps_primitives(expect, canonical, expected):
            expect(translate(canonical, typescript.DIALECT)) == expected

        def maps_containers(expect):
            expect(translate("List<Integer>", typescript.DIALECT)) == "Array<number>"
            expect(translate("Set<String>", typescript.DIALECT)) == "Set<string>"
            expect(translate("Map<Long, ObjectB>", typescript.DIALECT)) == "Map<number, ObjectB>"

        def maps_arrays(expect):
            expect(translate("boolean[]", typescript.DIALECT)) == "Array<boolean>"

    @pytest.mark.parametrize(
        "canonical",
        [
            "int",
            "java.lang.Integer",
            "List<Integer>",
            "Map<Integer, List<Set<Long>>>",
            "String[]",
            "Set<com.game.ObjectA>",
        ],
    )
    def is_idempotent(expect, canonical):
        once = translate(canonical, cpp.DIALECT)
        expect(translate(once, cpp.DIALECT)) == once

        once = translate(canonical, typescript.DIALECT)
        expect(translate(once, typescript.DIALECT)) == once

    def uses_default_dialect_settings(expect):
        dialect = TypeNameDialect({"int": "i32"})
        expect(translate("int[]", dialect)) == "i32[]"
        expect(translate("List<int>", dialect)) == "List<i32>"

    def rejects_malformed_names(expect):
        with pytest.raises(RegistryError):
            translate("List<", cpp.DIALECT)

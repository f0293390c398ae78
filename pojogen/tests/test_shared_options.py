import pytest

from pojogen.shared.options import (
    BOOLEAN_OPTIONS,
    GenerationOptions,
    merge_option_bags,
    parse_option_pairs,
    parse_options,
    to_option_string,
)


class TestParseOptions:
    def test_defaults(self):
        options = parse_options()
        assert options == GenerationOptions()
        assert options.package_name == "generated"
        assert options.emit_contract_types is False

    @pytest.mark.parametrize("key,attr", sorted(BOOLEAN_OPTIONS.items()))
    def test_boolean_flags(self, key, attr):
        assert getattr(parse_options({key: "true"}), attr) is True
        assert getattr(parse_options({key: "false"}), attr) is False

    @pytest.mark.parametrize("value", ["TRUE", "True", "yes", "1", "", "on"])
    def test_only_literal_true_enables(self, value):
        assert parse_options({"copy": value}).emit_copy_helpers is False

    def test_yaml_booleans(self):
        assert parse_options({"copy": True}).emit_copy_helpers is True
        assert parse_options({"copy": False}).emit_copy_helpers is False

    def test_string_options(self):
        options = parse_options(
            {
                "pojo_append": "Pojo",
                "jpa_version": "2.2",
                "package_name": "com.example.db",
                "pojo_extends": "com.example.Base",
            }
        )
        assert options.plain_record_suffix == "Pojo"
        assert options.persistence_annotation_version == "2.2"
        assert options.package_name == "com.example.db"
        assert options.pojo_extends == "com.example.Base"

    def test_blank_package_name_falls_back(self):
        assert parse_options({"package_name": "  "}).package_name == "generated"

    def test_list_options(self):
        options = parse_options(
            {
                "pojo_implements": "java.io.Serializable, com.example.Marker",
                "interface_implements": ["com.example.Contract"],
            }
        )
        assert options.pojo_implements == ("java.io.Serializable", "com.example.Marker")
        assert options.interface_implements == ("com.example.Contract",)

    def test_unknown_keys_ignored(self):
        assert parse_options({"unknown": "true"}) == GenerationOptions()


class TestDerivedOptions:
    def test_mutable_contracts(self):
        assert parse_options({"interfaces": "true"}).emit_mutable_contracts is True
        assert (
            parse_options({"interfaces": "true", "immutable_interfaces": "true"}).emit_mutable_contracts
            is False
        )
        assert parse_options().emit_mutable_contracts is False

    @pytest.mark.parametrize(
        "version,expected",
        [
            ("", True),
            ("2.1", True),
            ("2.2", True),
            ("3.0", True),
            ("2.0", False),
            ("1.0", False),
        ],
    )
    def test_index_annotations_need_jpa_21(self, version, expected):
        options = GenerationOptions(persistence_annotation_version=version)
        assert options.emit_index_annotations is expected


class TestOptionBags:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (True, "true"),
            (False, "false"),
            (None, ""),
            (2.1, "2.1"),
            (["a", "b"], "a,b"),
            ("x", "x"),
        ],
    )
    def test_to_option_string(self, value, expected):
        assert to_option_string(value) == expected

    def test_merge_later_wins(self):
        merged = merge_option_bags({"copy": True, "interfaces": "true"}, {"copy": "false"}, None)
        assert merged == {"copy": "false", "interfaces": "true"}

    def test_parse_option_pairs(self):
        bag = parse_option_pairs(["copy=true", "package_name = com.example", "interfaces"])
        assert bag == {"copy": "true", "package_name": "com.example", "interfaces": "true"}

import unittest
from decimal import Decimal
from pathlib import Path

from app_config.common import CommonAppSettings
from app_config.errors import FormatError, KeyNotFound
from app_config.groups import SettingsGroup, registered_groups, setting
from app_config.sources.file_source import FileConfigurationSource, MappingConfigurationSource
from app_config.sources.registry import clear_override, install_override, override

FIXTURES = Path(__file__).parent / "fixtures"


def _csv(raw: str) -> list:
    return [part.strip() for part in raw.split(",") if part.strip()]


class FeatureSettings(SettingsGroup, register=False):
    Debug: bool = setting()
    Ratio: float = setting()
    Budget: Decimal = setting()
    Hosts: list = setting(parse=_csv)


class ExtendedCommonSettings(CommonAppSettings, register=False):
    WelcomeMessage: str = setting()


class SettingsGroupTests(unittest.TestCase):
    def setUp(self) -> None:
        clear_override()
        install_override(MappingConfigurationSource({"Title": "Overhaul", "Port": "3000"}, name="test"))

    def tearDown(self) -> None:
        clear_override()

    def test_end_to_end_from_fixture_file(self) -> None:
        with override(FileConfigurationSource.from_file(FIXTURES / "common.env")):
            self.assertEqual(CommonAppSettings.Title, "Overhaul")
            self.assertEqual(CommonAppSettings.Port, 3000)

    def test_integer_setting_is_parsed(self) -> None:
        port = CommonAppSettings.Port
        self.assertIsInstance(port, int)
        self.assertEqual(port, 3000)

    def test_string_setting_is_returned_unchanged(self) -> None:
        install_override(MappingConfigurationSource({"Title": "  padded  ", "Port": "1"}))
        self.assertEqual(CommonAppSettings.Title, "  padded  ")

    def test_missing_key(self) -> None:
        install_override(MappingConfigurationSource({"Port": "3000"}, name="partial"))
        with self.assertRaises(KeyNotFound) as ctx:
            CommonAppSettings.Title
        self.assertEqual(ctx.exception.key, "Title")

    def test_unparseable_integer(self) -> None:
        install_override(MappingConfigurationSource({"Title": "Overhaul", "Port": "not-a-number"}))
        with self.assertRaises(FormatError) as ctx:
            CommonAppSettings.Port
        self.assertEqual(ctx.exception.key, "Port")
        self.assertEqual(ctx.exception.raw_value, "not-a-number")
        self.assertEqual(ctx.exception.expected, "int")

    def test_repeated_reads_are_equal(self) -> None:
        self.assertEqual(CommonAppSettings.Port, CommonAppSettings.Port)
        self.assertEqual(CommonAppSettings.Title, CommonAppSettings.Title)

    def test_values_are_not_cached(self) -> None:
        self.assertEqual(CommonAppSettings.Port, 3000)
        install_override(MappingConfigurationSource({"Title": "Overhaul", "Port": "4000"}))
        self.assertEqual(CommonAppSettings.Port, 4000)

    def test_parsed_types(self) -> None:
        source = MappingConfigurationSource(
            {"Debug": "true", "Ratio": "0.25", "Budget": "10.50", "Hosts": "a.example, b.example"}
        )
        bound = FeatureSettings.bind(source)
        self.assertIs(bound.Debug, True)
        self.assertEqual(bound.Ratio, 0.25)
        self.assertEqual(bound.Budget, Decimal("10.50"))
        self.assertEqual(bound.Hosts, ["a.example", "b.example"])

    def test_unparseable_boolean(self) -> None:
        source = MappingConfigurationSource({"Debug": "sometimes"})
        with self.assertRaises(FormatError):
            FeatureSettings.bind(source).Debug

    def test_format_error_names_group(self) -> None:
        bound = CommonAppSettings.bind(MappingConfigurationSource({"Port": "not-a-number"}))
        with self.assertRaises(FormatError) as ctx:
            bound.Port
        self.assertEqual(ctx.exception.group, "CommonAppSettings")
        self.assertIn("CommonAppSettings.Port", str(ctx.exception))
        self.assertIn("not-a-number", str(ctx.exception))

    def test_missing_key_names_group(self) -> None:
        bound = CommonAppSettings.bind(MappingConfigurationSource({}, name="empty"))
        with self.assertRaises(KeyNotFound) as ctx:
            bound.Title
        self.assertEqual(ctx.exception.group, "CommonAppSettings")
        self.assertIn("CommonAppSettings.Title", str(ctx.exception))
        self.assertIn("empty", str(ctx.exception))

    def test_inherited_setting_error_names_subclass(self) -> None:
        with self.assertRaises(KeyNotFound) as ctx:
            ExtendedCommonSettings.WelcomeMessage
        self.assertIn("ExtendedCommonSettings.WelcomeMessage", str(ctx.exception))

        install_override(MappingConfigurationSource({"Title": "Overhaul", "Port": "x"}))
        with self.assertRaises(FormatError) as ctx:
            ExtendedCommonSettings.Port
        self.assertIn("ExtendedCommonSettings.Port", str(ctx.exception))
        self.assertEqual(ctx.exception.group, "ExtendedCommonSettings")

    def test_redefined_group_is_registered_once(self) -> None:
        def define() -> type:
            class RedefinedSettings(SettingsGroup):
                Name: str = setting()

            return RedefinedSettings

        first = define()
        second = define()
        matches = [g for g in registered_groups() if g.__qualname__ == second.__qualname__]
        self.assertEqual(matches, [second])
        self.assertNotIn(first, registered_groups())

    def test_group_cannot_be_instantiated(self) -> None:
        with self.assertRaises(TypeError):
            CommonAppSettings()

    def test_bound_view_ignores_global_source(self) -> None:
        bound = CommonAppSettings.bind(MappingConfigurationSource({"Title": "Bound", "Port": "1"}))
        self.assertEqual(bound.Title, "Bound")
        self.assertEqual(CommonAppSettings.Title, "Overhaul")

    def test_bound_view_is_read_only(self) -> None:
        bound = CommonAppSettings.bind(MappingConfigurationSource({}))
        with self.assertRaises(AttributeError):
            bound.Title = "x"

    def test_accessors_follow_declaration_order(self) -> None:
        names = [accessor.name for accessor in CommonAppSettings.accessors()]
        self.assertEqual(names, ["Title", "Port"])
        self.assertEqual(CommonAppSettings.accessors()[1].type, int)
        self.assertEqual(CommonAppSettings.accessors()[1].qualified_name, "CommonAppSettings.Port")

    def test_subclass_inherits_accessors(self) -> None:
        names = [accessor.name for accessor in ExtendedCommonSettings.accessors()]
        self.assertEqual(names, ["Title", "Port", "WelcomeMessage"])
        self.assertTrue(all(a.group is ExtendedCommonSettings for a in ExtendedCommonSettings.accessors()))

    def test_snapshot(self) -> None:
        self.assertEqual(CommonAppSettings.snapshot(), {"Title": "Overhaul", "Port": 3000})

    def test_registration(self) -> None:
        self.assertIn(CommonAppSettings, registered_groups())
        self.assertNotIn(FeatureSettings, registered_groups())

    def test_setting_without_annotation_is_rejected(self) -> None:
        with self.assertRaises(TypeError):

            class Broken(SettingsGroup, register=False):
                Missing = setting()


if __name__ == "__main__":
    unittest.main()

import unittest

from pyvalidity.core.base_rule import BaseRule
from pyvalidity.core.config import Config
from pyvalidity.core.registry import RuleRegistry, discover_rules

CANONICAL_NAMES = {
    "required", "email", "URL", "IP", "alpha", "numeric", "alphanumeric",
    "hexadecimal", "hexColor", "lowercase", "uppercase", "int", "float",
    "date", "creditCard",
}


class EvenLengthRule(BaseRule):
    name = "evenLength"
    category = "Test"
    description = "Value length is even."

    def check(self, value: str) -> bool:
        return len(value) % 2 == 0


class TestRuleRegistry(unittest.TestCase):

    def setUp(self):
        self.registry = RuleRegistry.from_config(Config(load_files=False))

    def test_discovers_every_builtin_rule(self):
        names = {rule_class.name for rule_class in discover_rules()}
        self.assertEqual(names, CANONICAL_NAMES)
        self.assertEqual(set(self.registry), CANONICAL_NAMES)

    def test_lookup_resolves_aliases(self):
        self.assertIs(self.registry.lookup("url"), self.registry.lookup("URL"))
        self.assertIs(self.registry.lookup("ip"), self.registry.lookup("IP"))
        self.assertIn("url", self.registry)
        self.assertNotIn("url", list(self.registry))

    def test_unknown_name_is_not_found(self):
        self.assertIsNone(self.registry.lookup("isEmail"))
        self.assertIsNone(self.registry.lookup("Required"))
        with self.assertRaises(KeyError):
            self.registry["nope"]

    def test_registry_is_read_only(self):
        with self.assertRaises(TypeError):
            self.registry["evenLength"] = EvenLengthRule()
        with self.assertRaises(TypeError):
            self.registry._names["evenLength"] = EvenLengthRule()

    def test_extended_returns_new_registry(self):
        extended = self.registry.extended(EvenLengthRule())
        self.assertTrue(extended.lookup("evenLength").check("ab"))
        self.assertIsNone(self.registry.lookup("evenLength"))
        self.assertEqual(len(extended), len(self.registry) + 1)

    def test_duplicate_names_are_rejected(self):
        class ShadowRule(EvenLengthRule):
            name = "required"

        with self.assertRaises(ValueError):
            self.registry.extended(ShadowRule())

    def test_rules_receive_config(self):
        config = Config(load_files=False)
        config.set("rules.URL.require_protocol", True)
        registry = RuleRegistry.from_config(config)
        self.assertFalse(registry.lookup("URL").check("www.github.com"))


if __name__ == '__main__':
    unittest.main()

"""The rule registry: resolves rule names to rule instances.

Rule classes are discovered from the `pyvalidity.rules` package, the same
way new rules are added: by dropping a module containing `BaseRule`
subclasses into that package. A registry is built once per composition
root and is read-only afterwards; `extended` returns a new registry
rather than mutating the existing one.
"""

import inspect
import logging
import os
import pkgutil
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Type

from .base_rule import BaseRule
from .config import Config
from .. import rules as rules_package

# Initialize a logger for this module.
logger = logging.getLogger(__name__)


def discover_rules() -> List[Type[BaseRule]]:
    """Discovers all rule classes within the `pyvalidity.rules` package.

    This function iterates through the modules in the `rules` package,
    inspects their members, and collects all concrete classes that are
    subclasses of `BaseRule`.

    Returns:
        List[Type[BaseRule]]: The discovered rule classes, in module order.
    """
    found: List[Type[BaseRule]] = []
    path = os.path.dirname(rules_package.__file__)

    for _, name, _ in pkgutil.iter_modules([path]):
        try:
            module = __import__(f"pyvalidity.rules.{name}", fromlist=["*"])
        except ImportError as e:
            logger.warning(f"Could not import rule module {name}: {e}")
            continue
        for _, item in inspect.getmembers(module, inspect.isclass):
            if (
                issubclass(item, BaseRule)
                and item is not BaseRule
                and not inspect.isabstract(item)
                and item.__module__ == module.__name__
                and item not in found
            ):
                found.append(item)
    return found


class RuleRegistry(Mapping[str, BaseRule]):
    """An immutable mapping from rule names (and aliases) to rules.

    Iterating the registry yields canonical names only; aliases resolve
    through `lookup` and `in` but are not listed.
    """

    def __init__(self, rules: Iterable[BaseRule]) -> None:
        canonical: Dict[str, BaseRule] = {}
        names: Dict[str, BaseRule] = {}
        for rule in rules:
            for key in (rule.name, *rule.aliases):
                if key in names:
                    raise ValueError(f"Duplicate rule name '{key}' ({names[key]!r} and {rule!r})")
                names[key] = rule
            canonical[rule.name] = rule
        self._canonical = MappingProxyType(canonical)
        self._names = MappingProxyType(names)

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> "RuleRegistry":
        """Builds the default registry from every discovered rule class.

        Args:
            config (Optional[Config]): Passed to each rule's constructor so
                rules can read their settings once.

        Returns:
            RuleRegistry: A registry holding one instance of each rule.
        """
        rule_classes = discover_rules()
        logger.debug(f"Discovered {len(rule_classes)} rule classes")
        return cls(rule_class(config) for rule_class in rule_classes)

    def lookup(self, name: str) -> Optional[BaseRule]:
        """Returns the rule registered under `name` or an alias, else None."""
        return self._names.get(name)

    def extended(self, *rules: BaseRule) -> "RuleRegistry":
        """Returns a new registry with `rules` added to this one's rules.

        Raises:
            ValueError: If a name or alias of a new rule is already taken.
        """
        return RuleRegistry([*self._canonical.values(), *rules])

    def __getitem__(self, name: str) -> BaseRule:
        return self._names[name]

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._canonical)

    def __len__(self) -> int:
        return len(self._canonical)

    def __repr__(self) -> str:
        return f"RuleRegistry({sorted(self._canonical)})"

"""
Base rule class that all validation rules inherit from.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .config import Config


class BaseRule(ABC):
    """Abstract base class for all field validation rules.

    A rule is a named, pure, synchronous predicate over the current string
    value of a single field. Rules never look at other fields and never
    touch error state. Subclasses implement `check`; configuration is read
    once in `__init__` so that `check` stays a function of the value alone.

    Attributes:
        name (str): The canonical name used in a field's validation spec.
        aliases (Tuple[str, ...]): Alternative names resolving to this rule.
        category (str): A category for grouping rules (e.g., "Format").
        description (str): A brief explanation of what the rule accepts.
    """

    name: str = "unnamed"
    aliases: Tuple[str, ...] = ()
    category: str = "General"
    description: str = "No description provided"

    def __init__(self, config: Optional["Config"] = None) -> None:
        """Initializes the rule with the engine configuration.

        Args:
            config (Optional[Config]): The engine's configuration object.
                Rules that have no settings may ignore it.
        """
        self.config = config

    def __call__(self, value: str) -> bool:
        return self.check(value)

    @abstractmethod
    def check(self, value: str) -> bool:
        """Returns True if `value` satisfies the rule.

        Args:
            value (str): The field's current value.

        Returns:
            bool: Whether the value passes.
        """
        raise NotImplementedError("Subclasses must implement check()")

    def setting(self, key: str, default: Any = None) -> Any:
        """Reads a rule-specific setting from `rules.<name>.<key>`.

        Args:
            key (str): The setting name inside the rule's section.
            default (Any): Returned when no config is attached or the key
                is absent.

        Returns:
            Any: The configured value or the default.
        """
        if self.config is None:
            return default
        return self.config.get(f"rules.{self.name}.{key}", default)

    def describe(self) -> Dict[str, Any]:
        """Returns the rule's metadata in a standardized dictionary format."""
        return {
            "name": self.name,
            "aliases": list(self.aliases),
            "category": self.category,
            "description": self.description,
        }

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"

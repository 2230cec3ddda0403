"""Presents error state on markup containers, Bootstrap style.

A failing field gets the error class (default `has-error`) on the element
that wraps it, and the message is shown in the label that leads that
element. When the container has no label, one is created
(`<label for="<field id>" class="control-label">`). Clearing removes the
class and either removes the created label or puts the original label text
back.
"""

import logging
from typing import Optional

from ..core.adapter import ErrorStateAdapter
from ..core.config import Config
from ..core.field import Field, Label

logger = logging.getLogger(__name__)


class MarkupAdapter(ErrorStateAdapter):
    """Toggles the error class and message label on a field's container."""

    def __init__(self, config: Optional[Config] = None) -> None:
        """Initializes the adapter.

        Args:
            config (Optional[Config]): Supplies `markup.error_class` and
                `markup.label_class`.
        """
        self.error_class = config.get("markup.error_class", "has-error") if config else "has-error"
        self.label_class = config.get("markup.label_class", "control-label") if config else "control-label"

    def set_error(self, field: Field, message: str) -> None:
        logger.info(f"Error on field '{field.field_id}' with message: {message}")
        container = field.container
        container.classes.add(self.error_class)

        if container.label is None:
            container.label = Label(text=message, for_id=field.field_id, classes={self.label_class})
            container.owns_label = True
            return

        if not container.owns_label and container.saved_label_text is None:
            container.saved_label_text = container.label.text
        container.label.text = message

    def clear_error(self, field: Field) -> None:
        container = field.container
        container.classes.discard(self.error_class)

        if container.owns_label:
            container.label = None
            container.owns_label = False
        elif container.label is not None and container.saved_label_text is not None:
            container.label.text = container.saved_label_text
            container.saved_label_text = None

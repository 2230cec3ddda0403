"""Builds a `Document` from an HTML page.

Every `<form id="...">` becomes a `Form`. Every field element inside it
(by default `<input>`, see the `field_tags` setting) becomes a `Field`
whose validation and error specs are decoded from the configured
attributes (`data-validate` and `data-error` by default). The element that
directly wraps a field becomes its `FieldContainer`: its CSS classes, and
its first child when that child is a `<label>`.
"""
import logging
from html.parser import HTMLParser
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from ..core.config import Config
from ..core.field import Field, FieldContainer, Label
from ..core.form import Document, Form

logger = logging.getLogger(__name__)

# Elements that never have a closing tag.
VOID_ELEMENTS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
}


class _Node:
    """An open element on the parser stack."""

    def __init__(self, tag: str, attrs: Dict[str, Optional[str]], leading_label: bool = False) -> None:
        self.tag = tag
        self.attrs = attrs
        self.container = FieldContainer(classes=set((attrs.get("class") or "").split()))
        self.child_count = 0
        self.leading_label = leading_label
        self.text: List[str] = []


class FormMarkupParser(HTMLParser):
    """Collects forms and their fields while walking the markup."""

    def __init__(self, config: Optional[Config] = None) -> None:
        super().__init__(convert_charrefs=True)
        config = config or Config(load_files=False)
        self.field_tags = {tag.lower() for tag in config.get("field_tags", ["input"])}
        self.validate_attribute = config.get("attributes.validate", "data-validate")
        self.error_attribute = config.get("attributes.error", "data-error")
        self.document = Document()
        self._stack: List[_Node] = []
        self._forms: List[Form] = []
        # A non-void field element (e.g. textarea) whose text is its value.
        self._open_field: Optional[Tuple[_Node, Dict[str, Optional[str]], Form]] = None

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        attr_map = dict(attrs)
        parent = self._stack[-1] if self._stack else None
        if parent is not None:
            parent.child_count += 1
        leading_label = tag == "label" and parent is not None and parent.child_count == 1

        if tag == "form":
            form_id = attr_map.get("id")
            if form_id:
                self._forms.append(self.document.add_form(Form(form_id)))
            else:
                logger.debug("Ignoring a form without an id")

        if tag in self.field_tags and self._forms:
            if tag in VOID_ELEMENTS:
                self._add_field(tag, attr_map, attr_map.get("value"), parent, self._forms[-1])
            else:
                node = _Node(tag, attr_map)
                self._stack.append(node)
                self._open_field = (node, attr_map, self._forms[-1])
            return

        if tag not in VOID_ELEMENTS:
            self._stack.append(_Node(tag, attr_map, leading_label))

    def handle_startendtag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        self.handle_starttag(tag, attrs)
        if tag not in VOID_ELEMENTS:
            self.handle_endtag(tag)

    def handle_data(self, data: str) -> None:
        if self._stack:
            self._stack[-1].text.append(data)

    def handle_endtag(self, tag: str) -> None:
        if not any(node.tag == tag for node in self._stack):
            return  # Stray closing tag.

        while self._stack:
            node = self._stack.pop()
            parent = self._stack[-1] if self._stack else None
            self._close(node, parent)
            if node.tag == tag:
                break

    def close(self) -> None:
        super().close()
        while self._stack:
            node = self._stack.pop()
            self._close(node, self._stack[-1] if self._stack else None)

    def _close(self, node: _Node, parent: Optional[_Node]) -> None:
        if self._open_field is not None and self._open_field[0] is node:
            _, attr_map, form = self._open_field
            self._open_field = None
            self._add_field(node.tag, attr_map, "".join(node.text), parent, form)
        elif node.leading_label and parent is not None:
            parent.container.label = Label(
                text="".join(node.text).strip(),
                for_id=node.attrs.get("for"),
                classes=set((node.attrs.get("class") or "").split()),
            )
        elif node.tag == "form" and self._forms and self._forms[-1].form_id == node.attrs.get("id"):
            self._forms.pop()

        # Text inside a child still belongs to the parent's text content.
        if parent is not None and not node.leading_label:
            parent.text.extend(node.text)

    def _add_field(
        self,
        tag: str,
        attr_map: Dict[str, Optional[str]],
        value: Optional[str],
        parent: Optional[_Node],
        form: Form,
    ) -> None:
        field_id = attr_map.get("id") or attr_map.get("name") or f"{form.form_id}-{tag}-{len(form) + 1}"
        form.add_field(Field.from_attributes(
            field_id,
            value=value,
            validate=attr_map.get(self.validate_attribute),
            error=attr_map.get(self.error_attribute),
            container=parent.container if parent is not None else None,
            tag=tag,
            validate_attribute=self.validate_attribute,
            error_attribute=self.error_attribute,
        ))


def load_document(markup: str, config: Optional[Config] = None) -> Document:
    """Parses HTML text into a `Document` of forms and fields.

    Args:
        markup (str): The HTML page.
        config (Optional[Config]): Supplies field tags and attribute names.

    Returns:
        Document: The forms found, keyed by id.
    """
    parser = FormMarkupParser(config)
    parser.feed(markup)
    parser.close()
    logger.debug(f"Loaded {len(parser.document.forms)} forms from markup")
    return parser.document


def load_document_file(path: Union[str, Path], config: Optional[Config] = None) -> Document:
    """Reads an HTML file and parses it with `load_document`."""
    with open(path, "r", encoding="utf-8") as f:
        return load_document(f.read(), config)

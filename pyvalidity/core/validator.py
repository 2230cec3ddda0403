"""Handles the core validation pipeline for validity.

This module orchestrates form validation, which includes:
1.  Resolving a form from the document and snapshotting its fields.
2.  Clearing the error state of every field through the adapter.
3.  Evaluating each field's declared rules through the rule registry.
4.  Reporting every failing rule through the adapter and folding all
    results into one form-level verdict.

It also maps server-reported error codes back onto the fields that declare
interest in them.
"""

import logging
from typing import Dict, Iterable, Optional

from ..adapters.markup import MarkupAdapter
from .adapter import ClearCallback, ErrorCallback, ErrorStateAdapter
from .config import Config
from .field import Field
from .form import Document, Form
from .registry import RuleRegistry

# Initialize a logger for this module.
logger = logging.getLogger(__name__)


def evaluate_field(field: Field, registry: RuleRegistry) -> Dict[str, bool]:
    """Applies every rule declared on `field` to its current value.

    Evaluation has no side effects on error state. A rule name the
    registry does not know counts as a failure and is logged once per
    occurrence; so does a rule that raises.

    Args:
        field (Field): The field to evaluate.
        registry (RuleRegistry): Resolves rule names to rules.

    Returns:
        Dict[str, bool]: Rule name to pass/fail, in the spec's order. Empty
        for a field without a validation spec.
    """
    results: Dict[str, bool] = {}
    for rule_name in field.validation_spec:
        rule = registry.lookup(rule_name)
        if rule is None:
            logger.error(f"Unrecognized validation rule '{rule_name}' on field '{field.field_id}'")
            results[rule_name] = False
            continue
        try:
            results[rule_name] = bool(rule.check(field.value))
        except Exception:
            logger.exception(f"Rule '{rule_name}' failed while checking field '{field.field_id}'")
            results[rule_name] = False
    return results


def clear_error_states(form: Form, on_clear: ClearCallback) -> None:
    """Calls `on_clear` once for every field currently in `form`."""
    for field in form.snapshot():
        on_clear(field)


def validate_form(
    form: Form,
    on_error: ErrorCallback,
    on_clear: ClearCallback,
    registry: RuleRegistry,
    config: Optional[Config] = None,
) -> bool:
    """Validates every field of `form` and reports the failures.

    Every field of the snapshot is cleared before any rule runs. Each
    failing rule is reported with `on_error(field, message)`, so a field
    with several failures ends up showing the last one in spec order.

    Args:
        form (Form): The form to validate.
        on_error (ErrorCallback): Called for each failing rule.
        on_clear (ClearCallback): Called once per field before evaluation.
        registry (RuleRegistry): Resolves rule names to rules.
        config (Optional[Config]): Supplies the malformed-spec policy.
            Defaults to skipping malformed specs.

    Returns:
        bool: True if every rule on every field passed.
    """
    fields = form.snapshot()
    policy = config.malformed_spec_policy() if config is not None else "skip"
    logger.debug(f"Validating form '{form.form_id}' with {len(fields)} fields")

    for field in fields:
        on_clear(field)

    is_valid = True
    for field in fields:
        if field.validation_spec_error is not None:
            if policy == "fail":
                message = config.get("malformed_spec_message", "") if config is not None else ""
                on_error(field, message)
                is_valid = False
            else:
                logger.debug(f"Skipping malformed validation spec on field '{field.field_id}'")
            continue

        for rule_name, passed in evaluate_field(field, registry).items():
            if not passed:
                on_error(field, field.validation_spec[rule_name])
            is_valid = is_valid and passed

    logger.debug(f"Form '{form.form_id}' is {'valid' if is_valid else 'invalid'}")
    return is_valid


def display_server_errors(
    form: Form,
    codes: Iterable[str],
    on_error: ErrorCallback,
    on_clear: ClearCallback,
) -> None:
    """Shows server-reported error codes on the fields that declare them.

    Every field is cleared first. Then each field whose error spec contains
    one of `codes` gets `on_error(field, message)` for that code.

    Args:
        form (Form): The form the server rejected.
        codes (Iterable[str]): The error codes the server returned. A
            single string is treated as one code.
        on_error (ErrorCallback): Called for each matching code.
        on_clear (ClearCallback): Called once per field before matching.
    """
    if isinstance(codes, str):
        codes = [codes]
    code_set = frozenset(codes)
    fields = form.snapshot()

    for field in fields:
        on_clear(field)

    for field in fields:
        for code, message in field.error_spec.items():
            if code in code_set:
                on_error(field, message)


class Validity:
    """The composition root: binds a document to an adapter and registry.

    Every operation takes optional `on_error`/`on_clear` overrides. When
    they are omitted the callbacks of the adapter given here are used;
    there is no module-level default.

    Attributes:
        document (Document): Where form ids are resolved.
        config (Config): The engine configuration.
        registry (RuleRegistry): The rule vocabulary.
        adapter (ErrorStateAdapter): The default error-state presenter.
    """

    def __init__(
        self,
        document: Document,
        config: Optional[Config] = None,
        registry: Optional[RuleRegistry] = None,
        adapter: Optional[ErrorStateAdapter] = None,
    ) -> None:
        self.document = document
        self.config = config if config is not None else Config(load_files=False)
        self.registry = registry if registry is not None else RuleRegistry.from_config(self.config)
        self.adapter = adapter if adapter is not None else MarkupAdapter(self.config)

    def validate(
        self,
        form_id: str,
        on_error: Optional[ErrorCallback] = None,
        on_clear: Optional[ClearCallback] = None,
    ) -> bool:
        """Validates the form `form_id`; see `validate_form`.

        Raises:
            FormNotFoundError: If the document has no such form.
        """
        form = self.document.get_form(form_id)
        return validate_form(
            form,
            on_error or self.adapter.set_error,
            on_clear or self.adapter.clear_error,
            self.registry,
            self.config,
        )

    def display_server_errors(
        self,
        form_id: str,
        codes: Iterable[str],
        on_error: Optional[ErrorCallback] = None,
        on_clear: Optional[ClearCallback] = None,
    ) -> None:
        """Shows server error codes on the form `form_id`; see `display_server_errors`.

        Raises:
            FormNotFoundError: If the document has no such form.
        """
        form = self.document.get_form(form_id)
        display_server_errors(
            form,
            codes,
            on_error or self.adapter.set_error,
            on_clear or self.adapter.clear_error,
        )

    def clear_error_states(self, form_id: str, on_clear: Optional[ClearCallback] = None) -> None:
        """Clears the error state of every field in the form `form_id`.

        Raises:
            FormNotFoundError: If the document has no such form.
        """
        form = self.document.get_form(form_id)
        clear_error_states(form, on_clear or self.adapter.clear_error)

import unittest

from pyvalidity.adapters.recording import RecordingAdapter
from pyvalidity.core.config import Config
from pyvalidity.core.exceptions import FormNotFoundError
from pyvalidity.core.field import Field
from pyvalidity.core.form import Document, Form
from pyvalidity.core.registry import RuleRegistry
from pyvalidity.core.validator import (
    Validity,
    clear_error_states,
    display_server_errors,
    evaluate_field,
    validate_form,
)


def make_field(field_id, value="", validate=None, error=None):
    return Field.from_attributes(field_id, value=value, validate=validate, error=error)


class TestEvaluateField(unittest.TestCase):

    def setUp(self):
        self.registry = RuleRegistry.from_config(Config(load_files=False))

    def test_field_without_spec_is_vacuously_valid(self):
        self.assertEqual(evaluate_field(make_field("f", "anything"), self.registry), {})

    def test_required_on_empty_value(self):
        field = make_field("f", "", '{"required": "Required"}')
        self.assertEqual(evaluate_field(field, self.registry), {"required": False})

    def test_email_results(self):
        good = make_field("f", "xyz@we.com", '{"email": "Bad email"}')
        bad = make_field("f", "xyzwe.com", '{"email": "Bad email"}')
        self.assertEqual(evaluate_field(good, self.registry), {"email": True})
        self.assertEqual(evaluate_field(bad, self.registry), {"email": False})

    def test_results_follow_spec_order(self):
        field = make_field("f", "ABC", '{"uppercase": "Upper", "alpha": "Alpha", "int": "Int"}')
        results = evaluate_field(field, self.registry)
        self.assertEqual(list(results), ["uppercase", "alpha", "int"])
        self.assertEqual(list(results.values()), [True, True, False])

    def test_unknown_rule_fails_with_one_diagnostic(self):
        field = make_field("zip", "12345", '{"postcode": "Bad postcode", "numeric": "Digits"}')
        with self.assertLogs("pyvalidity.core.validator", level="ERROR") as logs:
            results = evaluate_field(field, self.registry)
        self.assertEqual(results, {"postcode": False, "numeric": True})
        self.assertEqual(len(logs.records), 1)
        self.assertIn("postcode", logs.output[0])
        self.assertIn("zip", logs.output[0])

    def test_raising_rule_counts_as_failure(self):
        registry = self.registry.extended(_ExplodingRule())
        field = make_field("f", "x", '{"explode": "Boom"}')
        with self.assertLogs("pyvalidity.core.validator", level="ERROR"):
            self.assertEqual(evaluate_field(field, registry), {"explode": False})

    def test_evaluation_does_not_touch_error_state(self):
        field = make_field("f", "", '{"required": "Required"}')
        evaluate_field(field, self.registry)
        self.assertEqual(field.container.classes, set())
        self.assertIsNone(field.container.label)


class _ExplodingRule:
    name = "explode"
    aliases = ()

    def check(self, value):
        raise RuntimeError("boom")


class TestValidateForm(unittest.TestCase):

    def setUp(self):
        self.config = Config(load_files=False)
        self.registry = RuleRegistry.from_config(self.config)
        self.recorder = RecordingAdapter()

    def run_validate(self, form):
        return validate_form(form, self.recorder.set_error, self.recorder.clear_error, self.registry, self.config)

    def test_empty_form_is_valid(self):
        self.assertTrue(self.run_validate(Form("empty")))
        self.assertEqual(self.recorder.calls, [])

    def test_required_scenario(self):
        form = Form("f", [make_field("name", "", '{"required": "Required"}')])
        self.assertFalse(self.run_validate(form))
        self.assertEqual(self.recorder.set_calls(), [("name", "Required")])

    def test_valid_email_scenario(self):
        form = Form("f", [make_field("email", "xyz@we.com", '{"email": "Bad email"}')])
        self.assertTrue(self.run_validate(form))
        self.assertEqual(self.recorder.set_calls(), [])

    def test_invalid_email_scenario(self):
        form = Form("f", [make_field("email", "xyzwe.com", '{"email": "Bad email"}')])
        self.assertFalse(self.run_validate(form))
        self.assertEqual(self.recorder.set_calls(), [("email", "Bad email")])

    def test_one_failing_field_among_two(self):
        form = Form("f", [
            make_field("name", "", '{"required": "Required"}'),
            make_field("email", "xyz@we.com", '{"required": "Required", "email": "Bad email"}'),
        ])
        self.assertFalse(self.run_validate(form))
        self.assertEqual(len(self.recorder.set_calls()), 1)

    def test_every_field_cleared_before_any_error(self):
        form = Form("f", [
            make_field("a", "", '{"required": "A required"}'),
            make_field("b", "ok"),
            make_field("c", "", '{"required": "C required"}'),
        ])
        self.run_validate(form)
        kinds = [kind for kind, _, _ in self.recorder.calls]
        self.assertEqual(kinds, ["clear", "clear", "clear", "set", "set"])
        self.assertEqual([fid for kind, fid, _ in self.recorder.calls if kind == "clear"], ["a", "b", "c"])

    def test_last_failing_rule_message_is_retained(self):
        form = Form("f", [make_field("code", "", '{"required": "Required", "numeric": "Digits only"}')])
        self.assertFalse(self.run_validate(form))
        self.assertEqual(self.recorder.set_calls(), [("code", "Required"), ("code", "Digits only")])
        self.assertEqual(self.recorder.message_for("code"), "Digits only")

    def test_unknown_rule_does_not_stop_the_pass(self):
        form = Form("f", [
            make_field("a", "x", '{"mystery": "Mystery"}'),
            make_field("b", "", '{"required": "Required"}'),
        ])
        with self.assertLogs("pyvalidity.core.validator", level="ERROR"):
            self.assertFalse(self.run_validate(form))
        self.assertEqual(self.recorder.set_calls(), [("a", "Mystery"), ("b", "Required")])

    def test_stale_errors_are_cleared_between_passes(self):
        field = make_field("name", "", '{"required": "Required"}')
        form = Form("f", [field])
        self.assertFalse(self.run_validate(form))
        field.value = "Ada"
        self.assertTrue(self.run_validate(form))
        self.assertFalse(self.recorder.has_error("name"))

    def test_fields_are_read_fresh_on_every_call(self):
        form = Form("f", [make_field("a", "ok", '{"required": "Required"}')])
        self.assertTrue(self.run_validate(form))
        form.add_field(make_field("b", "", '{"required": "Required"}'))
        self.assertFalse(self.run_validate(form))

    def test_field_added_during_a_pass_is_not_visited(self):
        form = Form("f", [make_field("a", "", '{"required": "Required"}')])
        late = make_field("late", "", '{"required": "Late required"}')

        def on_error(field, message):
            self.recorder.set_error(field, message)
            if late not in form.fields:
                form.add_field(late)

        self.assertFalse(validate_form(form, on_error, self.recorder.clear_error, self.registry))
        self.assertEqual(self.recorder.set_calls(), [("a", "Required")])
        self.assertIn(late, form.fields)

    def test_malformed_spec_is_skipped_by_default(self):
        with self.assertLogs("pyvalidity.core.field", level="WARNING"):
            broken = make_field("broken", "", "{not json")
        form = Form("f", [broken, make_field("b", "", '{"required": "Required"}')])
        self.assertFalse(self.run_validate(form))
        self.assertEqual(self.recorder.set_calls(), [("b", "Required")])

        form.remove_field("b")
        self.assertTrue(self.run_validate(form))

    def test_malformed_spec_fails_field_when_configured(self):
        self.config.set("malformed_spec", "fail")
        self.config.set("malformed_spec_message", "Broken rules")
        with self.assertLogs("pyvalidity.core.field", level="WARNING"):
            broken = make_field("broken", "", '["required"]')
        form = Form("f", [broken, make_field("ok", "x", '{"required": "Required"}')])
        self.assertFalse(self.run_validate(form))
        self.assertEqual(self.recorder.set_calls(), [("broken", "Broken rules")])


class TestServerErrors(unittest.TestCase):

    def setUp(self):
        self.recorder = RecordingAdapter()

    def test_matching_codes_are_reported(self):
        taken = make_field("email", "a@b.com", error='{"dup_email": "Already taken"}')
        other = make_field("user", "ada", error='{"other_code": "Something else"}')
        form = Form("f", [taken, other])
        display_server_errors(form, ["dup_email"], self.recorder.set_error, self.recorder.clear_error)
        self.assertEqual(self.recorder.set_calls(), [("email", "Already taken")])
        self.assertEqual([fid for kind, fid, _ in self.recorder.calls if kind == "clear"], ["email", "user"])

    def test_every_matching_code_on_a_field_is_reported(self):
        field = make_field("email", error='{"dup_email": "Already taken", "banned": "Domain banned"}')
        display_server_errors(Form("f", [field]), {"banned", "dup_email"}, self.recorder.set_error, self.recorder.clear_error)
        self.assertEqual(self.recorder.set_calls(), [("email", "Already taken"), ("email", "Domain banned")])

    def test_single_string_is_one_code(self):
        field = make_field("email", error='{"dup_email": "Already taken", "d": "Letter d"}')
        display_server_errors(Form("f", [field]), "dup_email", self.recorder.set_error, self.recorder.clear_error)
        self.assertEqual(self.recorder.set_calls(), [("email", "Already taken")])

    def test_server_errors_clear_previous_state(self):
        field = make_field("email", "", '{"required": "Required"}', '{"dup_email": "Already taken"}')
        form = Form("f", [field])
        self.recorder.set_error(field, "Required")
        display_server_errors(form, [], self.recorder.set_error, self.recorder.clear_error)
        self.assertFalse(self.recorder.has_error("email"))


class TestClearErrorStates(unittest.TestCase):

    def test_clear_twice_matches_clear_once(self):
        recorder = RecordingAdapter()
        field = make_field("a")
        form = Form("f", [field])
        recorder.set_error(field, "Bad")
        clear_error_states(form, recorder.clear_error)
        once = dict(recorder.errors)
        clear_error_states(form, recorder.clear_error)
        self.assertEqual(recorder.errors, once)
        self.assertEqual(recorder.errors, {})


class TestValidityFacade(unittest.TestCase):

    def setUp(self):
        self.recorder = RecordingAdapter()
        self.name = make_field("name", "", '{"required": "Required"}', '{"taken": "Name taken"}')
        self.document = Document([Form("signup", [self.name])])
        self.engine = Validity(self.document, adapter=self.recorder)

    def test_validate_uses_configured_adapter(self):
        self.assertFalse(self.engine.validate("signup"))
        self.assertEqual(self.recorder.message_for("name"), "Required")

    def test_callbacks_can_be_overridden_per_call(self):
        seen = []
        self.assertFalse(self.engine.validate("signup", lambda f, m: seen.append((f.field_id, m)), lambda f: None))
        self.assertEqual(seen, [("name", "Required")])
        self.assertEqual(self.recorder.calls, [])

    def test_display_server_errors(self):
        self.engine.display_server_errors("signup", ["taken"])
        self.assertEqual(self.recorder.message_for("name"), "Name taken")

    def test_clear_error_states(self):
        self.engine.validate("signup")
        self.engine.clear_error_states("signup")
        self.assertEqual(self.recorder.errors, {})

    def test_unknown_form_raises(self):
        with self.assertRaises(FormNotFoundError):
            self.engine.validate("missing")
        with self.assertRaises(LookupError):
            self.engine.display_server_errors("missing", ["taken"])
        with self.assertRaises(FormNotFoundError):
            self.engine.clear_error_states("missing")

    def test_default_adapter_marks_markup(self):
        engine = Validity(self.document)
        self.assertFalse(engine.validate("signup"))
        self.assertIn("has-error", self.name.container.classes)
        self.assertEqual(self.name.container.label.text, "Required")


if __name__ == '__main__':
    unittest.main()

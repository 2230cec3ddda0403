import copy
import unittest

from pyvalidity.adapters.markup import MarkupAdapter
from pyvalidity.core.config import Config
from pyvalidity.core.field import Field, FieldContainer, Label


class TestMarkupAdapter(unittest.TestCase):

    def setUp(self):
        self.adapter = MarkupAdapter()

    def test_set_error_creates_label(self):
        field = Field("email", container=FieldContainer(classes={"form-group"}))
        self.adapter.set_error(field, "Bad email")
        self.assertEqual(field.container.classes, {"form-group", "has-error"})
        self.assertEqual(field.container.label.text, "Bad email")
        self.assertEqual(field.container.label.for_id, "email")
        self.assertEqual(field.container.label.classes, {"control-label"})

    def test_set_error_twice_keeps_latest_message_only(self):
        field = Field("email")
        self.adapter.set_error(field, "First")
        label = field.container.label
        self.adapter.set_error(field, "Second")
        self.assertIs(field.container.label, label)
        self.assertEqual(label.text, "Second")

    def test_clear_reverses_created_label(self):
        field = Field("email", container=FieldContainer(classes={"form-group"}))
        before = copy.deepcopy(field.container)
        self.adapter.set_error(field, "Bad email")
        self.adapter.clear_error(field)
        self.assertEqual(field.container, before)

    def test_clear_restores_existing_label(self):
        field = Field("email", container=FieldContainer(label=Label("Email address", for_id="email")))
        before = copy.deepcopy(field.container)
        self.adapter.set_error(field, "Bad email")
        self.adapter.set_error(field, "Still bad")
        self.assertEqual(field.container.label.text, "Still bad")
        self.adapter.clear_error(field)
        self.assertEqual(field.container, before)

    def test_clear_without_error_is_a_no_op(self):
        field = Field("email", container=FieldContainer(classes={"x"}, label=Label("Email")))
        before = copy.deepcopy(field.container)
        self.adapter.clear_error(field)
        self.adapter.clear_error(field)
        self.assertEqual(field.container, before)

    def test_classes_come_from_config(self):
        config = Config(load_files=False)
        config.set("markup.error_class", "is-invalid")
        config.set("markup.label_class", "invalid-feedback")
        adapter = MarkupAdapter(config)
        field = Field("email")
        adapter.set_error(field, "Bad")
        self.assertIn("is-invalid", field.container.classes)
        self.assertEqual(field.container.label.classes, {"invalid-feedback"})


if __name__ == '__main__':
    unittest.main()

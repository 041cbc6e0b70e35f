from __future__ import annotations

from application.services.interpolator import Interpolator
from domain.variables import VariableStore


class TestInterpolator:
    def setup_method(self):
        self.interpolator = Interpolator()
        self.variables = VariableStore({"userId": 42, "token": "abc", "user": {"id": 1}, "nothing": None})

    def test_replaces_known_placeholders(self) -> None:
        assert self.interpolator.interpolate("/users/{{userId}}", self.variables) == "/users/42"

    def test_unknown_placeholders_are_left_untouched(self) -> None:
        assert self.interpolator.interpolate("/x/{{missing}}", self.variables) == "/x/{{missing}}"

    def test_string_without_placeholders_is_returned_as_is(self) -> None:
        assert self.interpolator.interpolate("plain", self.variables) == "plain"

    def test_walks_nested_structures(self) -> None:
        value = {"headers": {"Authorization": "Bearer {{token}}"}, "ids": ["{{userId}}", 7]}

        result = self.interpolator.interpolate(value, self.variables)

        assert result == {"headers": {"Authorization": "Bearer abc"}, "ids": ["42", 7]}

    def test_input_is_not_mutated(self) -> None:
        value = {"path": "{{userId}}"}
        self.interpolator.interpolate(value, self.variables)
        assert value == {"path": "{{userId}}"}

    def test_structured_values_are_inserted_as_json(self) -> None:
        assert self.interpolator.interpolate("u={{user}}", self.variables) == 'u={"id": 1}'

    def test_none_becomes_empty_string(self) -> None:
        assert self.interpolator.interpolate("[{{nothing}}]", self.variables) == "[]"

    def test_accepts_plain_mapping(self) -> None:
        assert self.interpolator.interpolate("{{a}}-{{b}}", {"a": 1, "b": "x"}) == "1-x"

    def test_non_string_scalars_pass_through(self) -> None:
        assert self.interpolator.interpolate(5, self.variables) == 5
        assert self.interpolator.interpolate(None, self.variables) is None

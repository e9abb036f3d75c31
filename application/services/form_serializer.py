# application/services/form_serializer.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from bs4 import Tag

FieldValue = Union[str, List[str]]

_SUBMITTABLE = ("input", "select", "textarea", "keygen")
_SUBMITTER_TYPES = {"submit", "button", "image", "reset", "file"}
_CHECKABLE_TYPES = {"checkbox", "radio"}
_NEWLINES = re.compile(r"\r?\n")
_LEADING_NEWLINE = re.compile(r"\A\r?\n")


@dataclass(frozen=True)
class FormSerializeResult:
    pairs: List[Tuple[str, str]]
    submitter: Optional[Tuple[str, str]] = None


class FormSerializer:
    """
    Collect the "successful controls" of an HTML form, the way a browser
    (or jQuery's serializeArray) would on submit:

    - named input/select/textarea elements only, in document order
    - disabled controls (or controls inside a disabled fieldset) are skipped
    - submit/button/image/reset/file inputs are skipped
    - checkboxes/radios only when checked (value defaults to "on")
    - textarea: one newline right after the start tag is dropped
    - select: selected options, or the first option of a single select
      when nothing is selected
    - the submit button's own name/value is appended when it has a name
    """

    def serialize(self, form: Tag, submit_button: Optional[Tag] = None) -> FormSerializeResult:
        pairs: List[Tuple[str, str]] = []

        for el in form.select(", ".join(_SUBMITTABLE)):
            name = el.get("name")
            if not name or self._is_disabled(el):
                continue

            if el.name == "input":
                typ = (el.get("type") or "text").lower()
                if typ in _SUBMITTER_TYPES:
                    continue
                if typ in _CHECKABLE_TYPES:
                    if not el.has_attr("checked"):
                        continue
                    pairs.append((name, el.get("value", "on")))
                    continue
                pairs.append((name, self._normalize(el.get("value", ""))))

            elif el.name == "select":
                for value in self._select_values(el):
                    pairs.append((name, value))

            elif el.name == "textarea":
                pairs.append((name, self._normalize(_LEADING_NEWLINE.sub("", el.get_text(), count=1))))

            else:
                pairs.append((name, self._normalize(el.get("value", ""))))

        submitter: Optional[Tuple[str, str]] = None
        if submit_button is not None and submit_button.get("name"):
            submitter = (submit_button["name"], submit_button.get("value", ""))
            pairs.append(submitter)

        return FormSerializeResult(pairs=pairs, submitter=submitter)

    def _is_disabled(self, el: Tag) -> bool:
        if el.has_attr("disabled"):
            return True
        for parent in el.parents:
            if parent.name == "fieldset" and parent.has_attr("disabled"):
                return True
        return False

    def _select_values(self, select: Tag) -> List[str]:
        options = [o for o in select.find_all("option") if not o.has_attr("disabled")]
        selected = [o for o in options if o.has_attr("selected")]

        if select.has_attr("multiple"):
            return [self._option_value(o) for o in selected]
        if selected:
            return [self._option_value(selected[0])]
        if options:
            return [self._option_value(options[0])]
        return []

    def _option_value(self, option: Tag) -> str:
        if option.has_attr("value"):
            return option["value"]
        return " ".join(option.get_text().split())

    def _normalize(self, value: str) -> str:
        return _NEWLINES.sub("\r\n", value or "")


def pairs_to_fields(pairs: List[Tuple[str, str]]) -> Dict[str, FieldValue]:
    """
    Fold pairs into a dict; a repeated name becomes a list of its values.
    例: [("a", "1"), ("a", "2"), ("b", "x")] => {"a": ["1", "2"], "b": "x"}
    """
    fields: Dict[str, FieldValue] = {}
    for key, value in pairs:
        if key in fields:
            current = fields[key]
            if not isinstance(current, list):
                current = [current]
                fields[key] = current
            current.append(value)
        else:
            fields[key] = value
    return fields

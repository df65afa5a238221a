from typing import List, Sequence, Tuple

from mimic.common import capitalize_first_letter, displayable_for_type

# Longest fragment a single parameter or return type may contribute
MAX_TYPE_COMPONENT_LENGTH = 32
MIN_LABEL_LENGTH = 2


class DefaultSignatureStrategy:
    """
    Derives the fragments appended to a member name when overloads need to be
    told apart.

    Order: argument labels (the parameter name stands in for `_`), generic
    `NameConstraint` pairs, parameter types, return type. Labels shorter than
    `min_label_length`, or already spelled at the end of the member name, are
    skipped so that `getName(name:)` does not become `getNameName`.
    """

    def __init__(
        self,
        max_type_length: int = MAX_TYPE_COMPONENT_LENGTH,
        min_label_length: int = MIN_LABEL_LENGTH,
    ):
        self.max_type_length = max_type_length
        self.min_label_length = min_label_length

    def _label_components(
        self, name: str, labels: Sequence[str], param_names: Sequence[str]
    ) -> List[str]:
        lowered_name = name.lower()
        components = []
        for label, param_name in zip(labels, param_names):
            text = param_name if label == "_" else label
            if len(text) < self.min_label_length:
                continue
            if lowered_name.endswith(text.lower()):
                continue
            components.append(capitalize_first_letter(text))
        return components

    def components(
        self,
        name: str,
        labels: Sequence[str],
        param_names: Sequence[str],
        param_types: Sequence[str],
        generic_params: Sequence[Tuple[str, str]],
        return_type: str,
    ) -> List[str]:
        components = self._label_components(name, labels, param_names)
        components.extend(
            capitalize_first_letter(g_name) + displayable_for_type(g_type)
            for g_name, g_type in generic_params
        )
        components.extend(
            displayable_for_type(t)[: self.max_type_length] for t in param_types
        )
        components.append(displayable_for_type(return_type)[: self.max_type_length])
        return [c for c in components if c]

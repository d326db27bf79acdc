"""Category classifier adapter — is a lexical category in spell-check scope?"""
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Union

Category = str
CategoryQuery = Union[None, Category, Iterable[Category]]

COMMENT = "comment"
COMMENT_DELIMITER = "comment-delimiter"
DOC = "doc"
STRING = "string"
FUNCTION_NAME = "function-name"
VARIABLE_NAME = "variable-name"
TYPE_NAME = "type-name"
CONSTANT = "constant"
KEYWORD = "keyword"


class PlainTextPolicy(Enum):
    """Where text without any category is checked."""
    NEVER = "never"
    PROSE = "prose"
    SOURCE = "source"
    ALWAYS = "always"


class CategoryClassifier:
    """Decides whether the categories at a position are checkable.

    Positions with several categories are checkable when any of them is in
    the global set or in the user-extension set. Positions without a
    category follow the plain-text policy and the document kind.
    """

    def __init__(self, checkable: Iterable[Category], extra: Iterable[Category] = (),
                 plain_text_policy: PlainTextPolicy = PlainTextPolicy.PROSE):
        self.checkable: FrozenSet[Category] = frozenset(checkable)
        self.extra: FrozenSet[Category] = frozenset(extra)
        self.plain_text_policy = plain_text_policy

    @classmethod
    def from_config(cls, config) -> "CategoryClassifier":
        return cls(
            config.checkable_categories,
            config.extra_categories,
            PlainTextPolicy(config.plain_text_policy),
        )

    def is_checkable(self, categories: CategoryQuery, prose: bool = True) -> bool:
        if categories is None:
            return self._plain_text_checkable(prose)

        if isinstance(categories, str):
            found = {categories}
        else:
            found = set(categories)
        if not found:
            return self._plain_text_checkable(prose)

        return bool(found & self.checkable) or bool(found & self.extra)

    def _plain_text_checkable(self, prose: bool) -> bool:
        policy = self.plain_text_policy
        if policy is PlainTextPolicy.ALWAYS:
            return True
        if policy is PlainTextPolicy.PROSE:
            return prose
        if policy is PlainTextPolicy.SOURCE:
            return not prose
        return False

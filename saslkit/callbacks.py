"""Callbacks that SASL mechanisms hand to an application's callback handler."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

__all__ = ["AuthorizeCallback", "RealmCallback", "RealmChoiceCallback"]


class AuthorizeCallback:
    """Asks whether an authenticated identity may act as an authorization identity."""

    def __init__(self, authentication_id: str | None, authorization_id: str | None) -> None:
        self.authentication_id = authentication_id
        self.authorization_id = authorization_id
        self.authorized = False
        self._authorized_id: str | None = None

    @property
    def authorized_id(self) -> str | None:
        """The id of the authorized user, or None when not authorized.

        Falls back to the requested authorization id when no canonical id was set.
        """
        if not self.authorized:
            return None
        return self.authorization_id if self._authorized_id is None else self._authorized_id

    @authorized_id.setter
    def authorized_id(self, value: str | None) -> None:
        self._authorized_id = value

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(authentication_id={self.authentication_id!r}, "
            f"authorization_id={self.authorization_id!r}, authorized={self.authorized!r})"
        )


@dataclass
class RealmCallback:
    """Asks for the realm to use for authentication."""

    prompt: str
    default_text: str | None = None
    text: str | None = field(default=None, init=False)


class RealmChoiceCallback:
    """Asks the handler to choose one or more realms from a list."""

    def __init__(
        self,
        prompt: str,
        choices: Sequence[str],
        default_choice: int,
        multiple_selections_allowed: bool,
    ) -> None:
        choices = tuple(choices)
        if not choices:
            raise ValueError("choices must not be empty")
        if not 0 <= default_choice < len(choices):
            raise ValueError(f"default choice {default_choice} is out of range")
        self.prompt = prompt
        self.choices = choices
        self.default_choice = default_choice
        self.multiple_selections_allowed = multiple_selections_allowed
        self.selected_indexes: tuple[int, ...] | None = None

    def select(self, *args: int) -> None:
        """Record the chosen index, or several when multiple selections are allowed."""
        if not args:
            raise ValueError("at least one index must be selected")
        if len(args) > 1 and not self.multiple_selections_allowed:
            raise ValueError("multiple selections are not allowed")
        for index in args:
            if not 0 <= index < len(self.choices):
                raise IndexError(f"choice index {index} is out of range")
        self.selected_indexes = tuple(args)

    @property
    def selected(self) -> tuple[str, ...]:
        """The chosen realm names, empty when nothing was selected."""
        if self.selected_indexes is None:
            return ()
        return tuple(self.choices[i] for i in self.selected_indexes)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(prompt={self.prompt!r}, choices={self.choices!r}, "
            f"default_choice={self.default_choice!r}, "
            f"multiple_selections_allowed={self.multiple_selections_allowed!r})"
        )
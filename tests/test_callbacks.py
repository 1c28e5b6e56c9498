import pytest

from saslkit.callbacks import AuthorizeCallback, RealmCallback, RealmChoiceCallback


def test_authorize_callback_holds_ids():
    cb = AuthorizeCallback("alice", "bob")
    assert cb.authentication_id == "alice"
    assert cb.authorization_id == "bob"
    assert cb.authorized is False


def test_authorized_id_none_until_authorized():
    cb = AuthorizeCallback("alice", "bob")
    cb.authorized_id = "canonical-bob"
    assert cb.authorized_id is None


def test_authorized_id_falls_back_to_authorization_id():
    cb = AuthorizeCallback("alice", "bob")
    cb.authorized = True
    assert cb.authorized_id == "bob"


def test_authorized_id_explicit_value_wins():
    cb = AuthorizeCallback("alice", "bob")
    cb.authorized = True
    cb.authorized_id = "canonical-bob"
    assert cb.authorized_id == "canonical-bob"
    cb.authorized = False
    assert cb.authorized_id is None


def test_realm_callback_defaults():
    cb = RealmCallback("Realm: ")
    assert cb.prompt == "Realm: "
    assert cb.default_text is None
    assert cb.text is None


def test_realm_callback_with_default_and_text():
    cb = RealmCallback("Realm: ", "example.com")
    cb.text = "other.example.com"
    assert cb.default_text == "example.com"
    assert cb.text == "other.example.com"


def test_realm_choice_single_selection():
    cb = RealmChoiceCallback("Pick", ["a.example.com", "b.example.com"], 0, False)
    assert cb.selected_indexes is None
    assert cb.selected == ()
    cb.select(1)
    assert cb.selected_indexes == (1,)
    assert cb.selected == ("b.example.com",)


def test_realm_choice_multiple_selection():
    cb = RealmChoiceCallback("Pick", ["a", "b", "c"], 2, True)
    cb.select(0, 2)
    assert cb.selected == ("a", "c")
    assert cb.default_choice == 2
    assert cb.choices == ("a", "b", "c")


def test_realm_choice_multiple_not_allowed():
    cb = RealmChoiceCallback("Pick", ["a", "b"], 0, False)
    with pytest.raises(ValueError):
        cb.select(0, 1)
    assert cb.selected_indexes is None


def test_realm_choice_index_out_of_range():
    cb = RealmChoiceCallback("Pick", ["a", "b"], 0, True)
    with pytest.raises(IndexError):
        cb.select(5)


def test_realm_choice_empty_selection_rejected():
    cb = RealmChoiceCallback("Pick", ["a"], 0, True)
    with pytest.raises(ValueError):
        cb.select()


@pytest.mark.parametrize("choices, default", [([], 0), (["a"], 1), (["a"], -1)])
def test_realm_choice_invalid_construction(choices, default):
    with pytest.raises(ValueError):
        RealmChoiceCallback("Pick", choices, default, False)
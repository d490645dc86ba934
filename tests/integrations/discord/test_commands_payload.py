from __future__ import annotations

import pytest

from interaction_kit.integrations.discord.commands import (
    BooleanOption,
    Command,
    IntegerChoice,
    IntegerOption,
    NumberChoice,
    NumberOption,
    StringChoice,
    StringOption,
    SubCommand,
    SubCommandGroup,
    UnknownCommandOption,
    UserOption,
    decode_command,
    decode_command_option,
    decode_commands,
    encode_commands,
)
from interaction_kit.integrations.discord.encoding import ABSENT
from interaction_kit.integrations.discord.enums import CommandOptionType, CommandType
from interaction_kit.integrations.discord.errors import DiscordDecodeError


def _permissions_payload() -> dict:
    return {
        "id": "123456789012345678",
        "application_id": "876543210987654321",
        "type": 1,
        "name": "permissions",
        "description": "Get or edit permissions for a user or a role",
        "options": [
            {
                "type": 2,
                "name": "user",
                "description": "Get or edit permissions for a user",
                "required": False,
                "options": [
                    {
                        "type": 1,
                        "name": "get",
                        "description": "Get permissions for a user",
                        "required": False,
                        "options": [
                            {
                                "type": 6,
                                "name": "user",
                                "description": "The user to get",
                                "required": True,
                            },
                        ],
                    }
                ],
            }
        ],
    }


def test_leaf_option_key_order() -> None:
    payload = BooleanOption(name="only_smol", description="Baby animals only").to_dict()
    assert list(payload) == ["type", "name", "description", "required"]
    assert payload["type"] == 5
    assert payload["required"] is False


def test_choices_emitted_only_when_present() -> None:
    bare = StringOption(name="animal", description="The type of animal")
    assert "choices" not in bare.to_dict()

    with_choices = StringOption(
        name="animal",
        description="The type of animal",
        required=True,
        choices=(StringChoice(name="Dog", value="animal_dog"),),
    )
    payload = with_choices.to_dict()
    assert list(payload) == ["type", "name", "description", "required", "choices"]
    assert payload["choices"] == [{"name": "Dog", "value": "animal_dog"}]


def test_number_and_integer_choices_encode_values() -> None:
    integer = IntegerOption(
        name="count", description="How many", choices=(IntegerChoice("one", 1),)
    )
    number = NumberOption(
        name="ratio", description="Scale", choices=(NumberChoice("half", 0.5),)
    )
    assert integer.to_dict()["choices"] == [{"name": "one", "value": 1}]
    assert number.to_dict()["type"] == 10
    assert number.to_dict()["choices"] == [{"name": "half", "value": 0.5}]


def test_empty_sub_command_omits_options() -> None:
    payload = SubCommand(name="list", description="List things").to_dict()
    assert "options" not in payload
    assert payload["type"] == 1


def test_command_always_emits_options_and_omits_unset_ids() -> None:
    command = Command(name="ping", description="Ping", kind=CommandType.CHAT_INPUT)
    payload = command.to_dict()
    assert payload == {
        "type": 1,
        "name": "ping",
        "description": "Ping",
        "options": [],
    }


def test_command_key_order_with_every_field() -> None:
    command = Command(
        name="ping",
        description="Ping",
        kind=CommandType.CHAT_INPUT,
        application_id="app",
        guild_id="guild",
        default_permission=True,
        id="cmd",
    )
    assert list(command.to_dict()) == [
        "id",
        "application_id",
        "guild_id",
        "type",
        "name",
        "description",
        "options",
        "default_permission",
    ]


def test_decode_permissions_tree() -> None:
    command = decode_command(_permissions_payload())
    assert command.id == "123456789012345678"
    assert command.guild_id is ABSENT
    assert command.default_permission is ABSENT
    group = command.options[0]
    assert isinstance(group, SubCommandGroup)
    sub = group.options[0]
    assert isinstance(sub, SubCommand)
    assert sub.options == (
        UserOption(name="user", description="The user to get", required=True),
    )


def test_permissions_tree_re_encodes_identically() -> None:
    payload = _permissions_payload()
    assert decode_command(payload).to_dict() == payload


def test_decode_tolerates_missing_type_and_options() -> None:
    command = decode_command({"name": "ping", "description": "Ping"})
    assert command.kind is CommandType.CHAT_INPUT
    assert command.options == ()


def test_decode_option_missing_required_defaults_false() -> None:
    option = decode_command_option({"type": 3, "name": "q", "description": "Query"})
    assert option == StringOption(name="q", description="Query")


def test_unknown_option_type_is_kept_verbatim() -> None:
    raw = {"type": 11, "name": "file", "description": "Upload", "required": True}
    option = decode_command_option(raw)
    assert isinstance(option, UnknownCommandOption)
    assert option.kind == 11
    assert option.kind is CommandOptionType(11)
    assert option.name == "file"
    assert option.to_dict() == raw


def test_decode_error_names_nested_choice_path() -> None:
    payload = {
        "name": "blep",
        "description": "Animals",
        "options": [
            {
                "type": 3,
                "name": "animal",
                "description": "The type of animal",
                "choices": [
                    {"name": "Dog", "value": "animal_dog"},
                    {"name": "Cat", "value": 7},
                ],
            }
        ],
    }
    with pytest.raises(DiscordDecodeError) as excinfo:
        decode_command(payload)
    assert excinfo.value.field == "options[0].choices[1].value"


def test_integer_choice_rejects_bool_value() -> None:
    with pytest.raises(DiscordDecodeError):
        decode_command_option(
            {
                "type": 4,
                "name": "n",
                "description": "d",
                "choices": [{"name": "yes", "value": True}],
            }
        )


def test_decode_commands_paths_each_item() -> None:
    with pytest.raises(DiscordDecodeError) as excinfo:
        decode_commands([{"name": "a", "description": "A"}, {"name": "b"}])
    assert excinfo.value.field == "commands[1].description"


def test_encode_commands_preserves_order() -> None:
    commands = [
        Command(name="b", description="B", kind=CommandType.CHAT_INPUT),
        Command(name="a", description="A", kind=CommandType.USER),
    ]
    assert [item["name"] for item in encode_commands(commands)] == ["b", "a"]
    assert encode_commands(commands)[1]["type"] == 2

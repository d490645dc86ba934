"""Discord interaction components, application commands and their codecs."""

from .builders import (
    BooleanBuilder,
    ChannelBuilder,
    CommandBuilder,
    IntegerBuilder,
    MentionableBuilder,
    NumberBuilder,
    RoleBuilder,
    StringBuilder,
    SubCommandBuilder,
    SubCommandGroupBuilder,
    UserBuilder,
)
from .command_registry import sync_commands
from .commands import (
    BooleanOption,
    ChannelOption,
    Command,
    CommandOption,
    IntegerChoice,
    IntegerOption,
    MentionableOption,
    NumberChoice,
    NumberOption,
    RoleOption,
    StringChoice,
    StringOption,
    SubCommand,
    SubCommandGroup,
    UnknownCommandOption,
    UserOption,
    decode_command,
    decode_command_option,
    decode_commands,
    encode_command,
    encode_commands,
)
from .components import (
    ActionRow,
    Button,
    Component,
    CustomEmoji,
    UnicodeEmoji,
    UnknownComponent,
    decode_component,
    encode_component,
)
from .config import DiscordCommandRegistration, DiscordKitConfig, load_config
from .constants import DISCORD_API_BASE_URL
from .definitions import compile_command_definitions, load_command_definitions
from .embeds import EmbedAuthor
from .encoding import ABSENT, Absent, MaybeAbsent, dumps_payload
from .enums import (
    ButtonStyle,
    CommandOptionType,
    CommandType,
    ComponentType,
    InteractionType,
)
from .errors import (
    BuilderConsumedError,
    DiscordAPIError,
    DiscordConfigError,
    DiscordDecodeError,
    DiscordError,
    DiscordPermanentError,
    DiscordTransientError,
)
from .interactions import (
    extract_command_path_and_options,
    extract_component_custom_id,
    extract_interaction_id,
    extract_interaction_token,
    extract_interaction_type,
    is_component_interaction,
)
from .rest import DiscordRestClient

__all__ = [
    "ABSENT",
    "Absent",
    "MaybeAbsent",
    "dumps_payload",
    "DISCORD_API_BASE_URL",
    "ButtonStyle",
    "CommandOptionType",
    "CommandType",
    "ComponentType",
    "InteractionType",
    "ActionRow",
    "Button",
    "Component",
    "CustomEmoji",
    "UnicodeEmoji",
    "UnknownComponent",
    "decode_component",
    "encode_component",
    "EmbedAuthor",
    "BooleanOption",
    "ChannelOption",
    "Command",
    "CommandOption",
    "IntegerChoice",
    "IntegerOption",
    "MentionableOption",
    "NumberChoice",
    "NumberOption",
    "RoleOption",
    "StringChoice",
    "StringOption",
    "SubCommand",
    "SubCommandGroup",
    "UnknownCommandOption",
    "UserOption",
    "decode_command",
    "decode_command_option",
    "decode_commands",
    "encode_command",
    "encode_commands",
    "BooleanBuilder",
    "ChannelBuilder",
    "CommandBuilder",
    "IntegerBuilder",
    "MentionableBuilder",
    "NumberBuilder",
    "RoleBuilder",
    "StringBuilder",
    "SubCommandBuilder",
    "SubCommandGroupBuilder",
    "UserBuilder",
    "DiscordCommandRegistration",
    "DiscordKitConfig",
    "load_config",
    "compile_command_definitions",
    "load_command_definitions",
    "BuilderConsumedError",
    "DiscordAPIError",
    "DiscordConfigError",
    "DiscordDecodeError",
    "DiscordError",
    "DiscordPermanentError",
    "DiscordTransientError",
    "extract_command_path_and_options",
    "extract_component_custom_id",
    "extract_interaction_id",
    "extract_interaction_token",
    "extract_interaction_type",
    "is_component_interaction",
    "DiscordRestClient",
    "sync_commands",
]

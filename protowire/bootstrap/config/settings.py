from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource


class DecoderSettings(BaseModel):
    strict_wire_types: Annotated[
        bool,
        Field(
            description=(
                "Check every extraction against the wire type of the current tag.\n"
                "When disabled (default), reading a field with the wrong primitive\n"
                "is not detected and yields garbage. When enabled, the mismatch\n"
                "raises WireTypeMismatchError before any byte is consumed."
            ),
            default=False
        )
    ]

    max_length: Annotated[
        int | None,
        Field(
            description=(
                "Upper bound for any length prefix (strings, bytes, embedded messages).\n"
                "Unset means only the size of the input bounds a length prefix."
            ),
            default=None,
            ge=0
        )
    ]


class InspectSettings(BaseModel):
    max_depth: Annotated[
        int,
        Field(
            description="Levels of embedded messages expanded by the inspector.",
            default=16,
            ge=0
        )
    ]


class OutputSettings(BaseModel):
    format: Annotated[
        Literal["json", "yaml"],
        Field(
            description="Rendering used by protodump.",
            default="json"
        )
    ]


class ProtowireConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PROTOWIRE_",
        env_nested_delimiter="__",
        extra="ignore"
    )

    decoder: Annotated[
        DecoderSettings,
        Field(
            description="Behavior of readers created through the bootstrap factories.",
            default_factory=DecoderSettings
        )
    ]

    inspect: Annotated[
        InspectSettings,
        Field(
            description="Schema-less inspection limits.",
            default_factory=InspectSettings
        )
    ]

    output: Annotated[
        OutputSettings,
        Field(
            description="protodump output options.",
            default_factory=OutputSettings
        )
    ]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        configfile = settings_cls.model_config.get("yaml_file")
        if configfile is None:
            return init_settings, env_settings
        return init_settings, env_settings, YamlConfigSettingsSource(settings_cls, yaml_file=configfile)

    @classmethod
    def from_file(cls, configfile: Path | None, **values) -> "ProtowireConfig":
        """
        Build the configuration from explicit `values`, PROTOWIRE_* environment
        variables and `configfile`, in that order of precedence.

        Without a file only values and the environment apply. The command
        line is never consulted here; resolving a path from it is the job of
        the protodump entry point.
        """
        if configfile is None:
            return cls(**values)

        bound = type(
            cls.__name__,
            (cls,),
            {
                "__module__": cls.__module__,
                "model_config": SettingsConfigDict({**cls.model_config, "yaml_file": configfile}),
            },
        )
        return bound(**values)

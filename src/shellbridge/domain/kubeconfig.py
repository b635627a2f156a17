"""Pydantic models for a normalized kubeconfig-shaped document.

Field names are snake_case in Python and camelCase on the wire
(``model_dump(by_alias=True)``).  Validation accepts the camelCase names
produced by the loader's normalization as well as the remaining kebab-case
keys that kubeconfig files use natively.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _wire(camel: str, *kebab: str) -> dict[str, Any]:
    """Field kwargs: serialize as *camel*, accept *camel*, *kebab* or the python name."""
    return {
        "serialization_alias": camel,
        "validation_alias": AliasChoices(camel, *kebab),
    }


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")


class ClusterInfo(_WireModel):
    """``clusters[].cluster``: API server endpoint and CA material."""

    server: str | None = None
    certificate_authority: str | None = Field(
        default=None, **_wire("certificateAuthority", "certificate-authority")
    )
    certificate_authority_data: str | None = Field(
        default=None, **_wire("certificateAuthorityData", "certificate-authority-data")
    )
    insecure_skip_tls_verify: bool | None = Field(
        default=None, **_wire("insecureSkipTlsVerify", "insecure-skip-tls-verify")
    )


class NamedCluster(_WireModel):
    name: str
    cluster: ClusterInfo = Field(default_factory=ClusterInfo)

    @field_validator("cluster", mode="before")
    @classmethod
    def _null_cluster(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def server(self) -> str | None:
        return self.cluster.server


class ContextInfo(_WireModel):
    """``contexts[].context``: references by name plus an optional namespace."""

    cluster: str | None = None
    user: str | None = None
    namespace: str | None = None


class NamedContext(_WireModel):
    name: str
    context: ContextInfo = Field(default_factory=ContextInfo)

    @field_validator("context", mode="before")
    @classmethod
    def _null_context(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def cluster_ref(self) -> str | None:
        return self.context.cluster

    @property
    def user_ref(self) -> str | None:
        return self.context.user

    @property
    def namespace(self) -> str | None:
        return self.context.namespace


class ExecEnvVar(_WireModel):
    name: str
    value: str


class ExecConfig(_WireModel):
    """Exec-based credential plugin invocation."""

    command: str
    args: list[str] | None = None
    env: list[ExecEnvVar] | None = None
    api_version: str | None = Field(default=None, **_wire("apiVersion"))
    interactive_mode: str | None = Field(default=None, **_wire("interactiveMode"))
    provide_cluster_info: bool | None = Field(default=None, **_wire("provideClusterInfo"))


class UserCredentials(_WireModel):
    """``users[].user``: one of token, client cert/key, basic auth or exec."""

    token: str | None = None
    token_file: str | None = Field(default=None, **_wire("tokenFile"))
    client_certificate: str | None = Field(default=None, **_wire("clientCertificate"))
    client_key: str | None = Field(default=None, **_wire("clientKey"))
    client_certificate_data: str | None = Field(
        default=None, **_wire("clientCertificateData", "client-certificate-data")
    )
    client_key_data: str | None = Field(
        default=None, **_wire("clientKeyData", "client-key-data")
    )
    username: str | None = None
    password: str | None = None
    exec: ExecConfig | None = None

    @property
    def kind(self) -> str:
        """Credential variant used for display: token, client-certificate, exec, basic or none."""
        if self.exec is not None:
            return "exec"
        if self.token or self.token_file:
            return "token"
        if self.client_certificate or self.client_certificate_data:
            return "client-certificate"
        if self.username:
            return "basic"
        return "none"


class NamedUser(_WireModel):
    name: str
    user: UserCredentials


class ConfigurationDocument(_WireModel):
    """A loaded kubeconfig snapshot.

    Each load produces a fresh instance that fully replaces the previous one.
    """

    api_version: str | None = Field(default=None, **_wire("apiVersion"))
    kind: str | None = None
    clusters: list[NamedCluster] = Field(default_factory=list)
    contexts: list[NamedContext] = Field(default_factory=list)
    users: list[NamedUser] = Field(default_factory=list)
    current_context: str | None = Field(default=None, **_wire("currentContext"))
    preferences: dict[str, Any] = Field(default_factory=dict)

    @field_validator("clusters", "contexts", "users", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("preferences", mode="before")
    @classmethod
    def _null_mapping(cls, value: Any) -> Any:
        return {} if value is None else value

    def to_wire(self) -> dict[str, Any]:
        """Dump with camelCase keys, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

from datetime import datetime
from pathlib import PurePosixPath
from typing import Dict, List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer

# key -> every distinct value observed for it across the files processed
ConfigKeyValues = Dict[str, Set[str]]


class Group(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    group_id: int
    users: List[str] = Field(default_factory=list)


class UserIdentity(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    user_id: int = 0
    home: str = ""
    shell: str = ""
    groups: Tuple[Group, ...] = ()

    @classmethod
    def empty(cls) -> "UserIdentity":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.name

    @property
    def home_path(self) -> PurePosixPath:
        return PurePosixPath(self.home)


class ShellConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    aliases: ConfigKeyValues = Field(default_factory=dict)
    exports: ConfigKeyValues = Field(default_factory=dict)
    variables: ConfigKeyValues = Field(default_factory=dict)
    sources: List[str] = Field(default_factory=list)

    @field_serializer("aliases", "exports", "variables")
    def _sorted_values(self, mapping: ConfigKeyValues) -> Dict[str, List[str]]:
        return {key: sorted(values) for key, values in sorted(mapping.items())}


class HistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: Optional[datetime] = None
    command: str


class ShellHistory(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str = ""
    commands: List[HistoryEntry] = Field(default_factory=list)


class AuthorizedKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    options: str = ""
    key_type: str
    public_key: str
    comment: str = ""


class KnownHost(BaseModel):
    model_config = ConfigDict(frozen=True)

    marker: str = ""
    hostnames: str
    key_type: str
    public_key: str
    comment: str = ""


class CrontabSchedule(BaseModel):
    model_config = ConfigDict(frozen=True)

    minute: str = ""
    hour: str = ""
    day_of_month: str = ""
    month: str = ""
    day_of_week: str = ""
    special: str = ""


class CrontabTask(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    command: str
    schedule: CrontabSchedule
    source: str = ""


class InitdService(BaseModel):
    model_config = ConfigDict(frozen=True)

    service_name: str
    service_script: str = ""


class SystemdService(BaseModel):
    model_config = ConfigDict(frozen=True)

    service_name: str
    path: str = ""
    config: Dict[str, Dict[str, Optional[str]]] = Field(default_factory=dict)


class UserArtifact(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_info: UserIdentity
    bash_config: ShellConfig = Field(default_factory=ShellConfig)
    zsh_config: ShellConfig = Field(default_factory=ShellConfig)
    bash_history: ShellHistory = Field(default_factory=ShellHistory)
    zsh_history: ShellHistory = Field(default_factory=ShellHistory)
    authorized_keys: List[AuthorizedKey] = Field(default_factory=list)
    known_hosts: List[KnownHost] = Field(default_factory=list)
    crontab_tasks: List[CrontabTask] = Field(default_factory=list)
    groups: List[Group] = Field(default_factory=list)
    systemd_user_services: List[SystemdService] = Field(default_factory=list)


class SystemSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    evidence_root: str = ""
    users: List[UserArtifact] = Field(default_factory=list)
    groups: List[Group] = Field(default_factory=list)
    initd_services: List[InitdService] = Field(default_factory=list)
    systemd_services: List[SystemdService] = Field(default_factory=list)
    crontab_tasks: List[CrontabTask] = Field(default_factory=list)
    failures: Dict[str, str] = Field(default_factory=dict)

    def user(self, name: str) -> Optional[UserArtifact]:
        for artifact in self.users:
            if artifact.user_info.name == name:
                return artifact
        return None

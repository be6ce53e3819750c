"""
Per-user and per-system artifact assembly.

Identity (/etc/passwd) and group (/etc/group) files are mandatory: if either
cannot be read or contains a malformed record, the error propagates and no
aggregate is produced. Every other artifact is optional and degrades to an
empty value on its own, without stopping the remaining extractors.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from .artifacts.authorized_keys import get_authorized_keys
from .artifacts.bash import load_bash_config, load_bash_history
from .artifacts.crontab import process_crontab_files, process_system_crontabs
from .artifacts.group import SystemGroups, process_group_file
from .artifacts.known_hosts import get_known_hosts
from .artifacts.passwd import read_passwd
from .artifacts.services import process_init_services_files, process_services_files, process_user_services
from .artifacts.zsh import load_zsh_config, load_zsh_history
from .config import Settings, settings
from .errors import UnixArtifactsError
from .models import CrontabTask, Group, SystemSnapshot, UserArtifact, UserIdentity
from .vfs import VirtualFileSystem

logger = logging.getLogger(__name__)


class ArtifactAggregator:
    """One extraction pass over one evidence filesystem."""

    def __init__(self, vfs: VirtualFileSystem, config: Optional[Settings] = None):
        self.vfs = vfs
        self.settings = config or settings
        self._users: Optional[List[UserIdentity]] = None
        self._groups: Optional[SystemGroups] = None

    @property
    def strict(self) -> bool:
        return self.settings.STRICT_PARSING

    # --- Mandatory sources ---

    def load_users(self) -> List[UserIdentity]:
        if self._users is None:
            self._users = read_passwd(
                self.vfs,
                skip_malformed=self.settings.SKIP_MALFORMED_RECORDS,
                attempts=self.settings.READ_RETRY_ATTEMPTS,
            )
            logger.info(f"Loaded {len(self._users)} identities from /etc/passwd")
        return self._users

    def load_groups(self) -> SystemGroups:
        if self._groups is None:
            self._groups = process_group_file(
                self.vfs,
                skip_malformed=self.settings.SKIP_MALFORMED_RECORDS,
                attempts=self.settings.READ_RETRY_ATTEMPTS,
            )
            logger.info(f"Loaded {len(self._groups.groups)} groups from /etc/group")
        return self._groups

    def groups_for_user(self, username: str) -> List[Group]:
        return self.load_groups().get_groups_for_user(username)

    def _with_groups(self, identity: UserIdentity) -> UserIdentity:
        return identity.model_copy(update={"groups": tuple(self.groups_for_user(identity.name))})

    def find_user(self, username: str) -> UserIdentity:
        """Resolved identity, or ``UserIdentity.empty()`` if the name is absent."""
        for identity in self.load_users():
            if identity.name == username:
                return self._with_groups(identity)
        return UserIdentity.empty()

    # --- Assembly ---

    def _assemble(
        self,
        identity: UserIdentity,
        vfs: VirtualFileSystem,
        system_tasks: Optional[List[CrontabTask]] = None,
    ) -> UserArtifact:
        home = identity.home_path
        strict = self.strict
        logger.debug(f"Assembling artifacts for {identity.name} (home={home})")
        return UserArtifact(
            user_info=identity,
            bash_config=load_bash_config(vfs, home),
            zsh_config=load_zsh_config(vfs, home),
            bash_history=load_bash_history(vfs, home, strict=strict),
            zsh_history=load_zsh_history(vfs, home, strict=strict),
            authorized_keys=get_authorized_keys(vfs, home),
            known_hosts=get_known_hosts(vfs, home),
            crontab_tasks=process_crontab_files(vfs, identity.name, strict=strict, system_tasks=system_tasks),
            groups=list(identity.groups),
            systemd_user_services=process_user_services(vfs, home, strict=strict),
        )

    def collect_user(self, username: str) -> UserArtifact:
        identity = self.find_user(username)
        if identity.is_empty:
            logger.warning(f"User '{username}' not found in /etc/passwd")
            return UserArtifact(user_info=identity)
        return self._assemble(identity, self.vfs)

    def _collect_isolated(
        self,
        identity: UserIdentity,
        vfs: VirtualFileSystem,
        system_tasks: List[CrontabTask],
    ) -> Tuple[Optional[UserArtifact], Optional[str]]:
        try:
            return self._assemble(identity, vfs, system_tasks), None
        except UnixArtifactsError as e:
            if not self.settings.ISOLATE_USER_FAILURES:
                raise
            logger.error(f"Extraction failed for {identity.name}: {e}")
            return None, str(e)

    def collect_system(self) -> SystemSnapshot:
        identities = [self._with_groups(identity) for identity in self.load_users()]
        system_tasks = process_system_crontabs(self.vfs, strict=self.strict)

        workers = max(1, self.settings.MAX_WORKERS)
        if workers > 1 and len(identities) > 1:
            logger.info(f"Assembling {len(identities)} users on {workers} workers")
            with ThreadPoolExecutor(max_workers=workers) as executor:
                # one cloned storage view per task; map() keeps passwd order
                results = list(
                    executor.map(
                        lambda identity: self._collect_isolated(identity, self.vfs.clone(), system_tasks),
                        identities,
                    )
                )
        else:
            results = [self._collect_isolated(identity, self.vfs, system_tasks) for identity in identities]

        users: List[UserArtifact] = []
        failures = {}
        for identity, (artifact, error) in zip(identities, results):
            if artifact is not None:
                users.append(artifact)
            else:
                failures[identity.name] = error

        snapshot = SystemSnapshot(
            evidence_root=self.vfs.root(),
            users=users,
            groups=list(self.load_groups().groups),
            initd_services=process_init_services_files(self.vfs),
            systemd_services=process_services_files(self.vfs, strict=self.strict),
            crontab_tasks=system_tasks,
            failures=failures,
        )
        logger.info(f"System snapshot: {len(users)} users, {len(failures)} failures")
        return snapshot


def collect_user_artifact(vfs: VirtualFileSystem, username: str, config: Optional[Settings] = None) -> UserArtifact:
    return ArtifactAggregator(vfs, config).collect_user(username)


def collect_system_snapshot(vfs: VirtualFileSystem, config: Optional[Settings] = None) -> SystemSnapshot:
    return ArtifactAggregator(vfs, config).collect_system()

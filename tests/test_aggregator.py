from datetime import datetime

import pytest

from unix_artifacts.aggregator import ArtifactAggregator, collect_system_snapshot, collect_user_artifact
from unix_artifacts.chroot import ChRootFileSystem
from unix_artifacts.config import Settings
from unix_artifacts.errors import MalformedRecord, StorageUnavailable
from unix_artifacts.history import EPOCH
from unix_artifacts.models import UserIdentity
from unix_artifacts.vfs import StdVirtualFS

# a timestamp line whose digits cannot be converted to an int
BAD_SENTINEL_HISTORY = "#" + "9" * 5000 + "\nls\n"


def test_collect_user(vfs):
    artifact = collect_user_artifact(vfs, "forensicrs")
    info = artifact.user_info
    assert (info.name, info.user_id, info.home, info.shell) == ("forensicrs", 1000, "/home/forensicrs", "/bin/bash")
    assert [g.name for g in info.groups] == ["adm", "sudo"]
    assert [g.name for g in artifact.groups] == ["adm", "sudo"]

    assert artifact.bash_config.aliases["rm"] == {"rm -i"}
    assert artifact.bash_history.commands[0].timestamp == datetime(2023, 1, 18, 8, 17, 6)
    assert artifact.zsh_history.commands == []
    assert len(artifact.authorized_keys) == 2
    assert len(artifact.known_hosts) == 2
    assert len(artifact.crontab_tasks) == 3
    assert artifact.crontab_tasks[0].source == "/etc/cron.d/backup"
    assert artifact.systemd_user_services == []


def test_collect_zsh_user(vfs):
    artifact = collect_user_artifact(vfs, "gwanza")
    assert artifact.zsh_config.aliases == {"ll": {"ls -la"}}
    assert artifact.zsh_history.commands[0].command == "vim ~/.zsh_history"
    assert [s.service_name for s in artifact.systemd_user_services] == ["syncthing.service"]
    assert artifact.authorized_keys == []
    assert artifact.crontab_tasks == []
    assert artifact.groups == []


def test_unknown_user_gives_empty_artifact(vfs):
    artifact = collect_user_artifact(vfs, "mallory")
    assert artifact.user_info == UserIdentity.empty()
    assert artifact.user_info.is_empty
    assert artifact.bash_history.commands == []
    assert artifact.crontab_tasks == []
    assert artifact.groups == []


def test_missing_passwd_is_storage_unavailable(vfs, evidence_root):
    (evidence_root / "etc/passwd").unlink()
    with pytest.raises(StorageUnavailable) as excinfo:
        collect_user_artifact(vfs, "forensicrs")
    assert excinfo.value.source == "/etc/passwd"
    with pytest.raises(StorageUnavailable):
        collect_system_snapshot(vfs)


def test_missing_group_file_is_storage_unavailable(vfs, evidence_root):
    (evidence_root / "etc/group").unlink()
    with pytest.raises(StorageUnavailable) as excinfo:
        collect_user_artifact(vfs, "forensicrs")
    assert excinfo.value.source == "/etc/group"


def test_malformed_passwd_aborts_unless_skipped(vfs, evidence_root):
    with (evidence_root / "etc/passwd").open("a") as f:
        f.write("corrupted-record\n")
    with pytest.raises(MalformedRecord):
        collect_system_snapshot(vfs)

    snapshot = collect_system_snapshot(vfs, Settings(SKIP_MALFORMED_RECORDS=True))
    assert [u.user_info.name for u in snapshot.users] == ["root", "syslog", "forensicrs", "gwanza"]


def test_mandatory_sources_are_read_once_per_pass(vfs):
    aggregator = ArtifactAggregator(vfs)
    assert aggregator.load_users() is aggregator.load_users()
    assert aggregator.load_groups() is aggregator.load_groups()


def test_collect_system(vfs, evidence_root):
    snapshot = collect_system_snapshot(vfs)
    assert snapshot.evidence_root == str(evidence_root)
    assert [u.user_info.name for u in snapshot.users] == ["root", "syslog", "forensicrs", "gwanza"]
    assert len(snapshot.groups) == 8
    assert [s.service_name for s in snapshot.initd_services] == ["apache2"]
    assert [s.service_name for s in snapshot.systemd_services] == [
        "getty@tty1.service",
        "ssh.service",
        "tortuga.service",
    ]
    assert [t.username for t in snapshot.crontab_tasks] == ["root", "forensicrs"]
    assert snapshot.failures == {}

    root = snapshot.user("root")
    assert [t.command for t in root.crontab_tasks] == ["cd / && run-parts --report /etc/cron.hourly"]
    assert snapshot.user("syslog").bash_history.commands[0].timestamp is None
    assert snapshot.user("nobody") is None


def test_parallel_assembly_matches_serial(vfs):
    serial = collect_system_snapshot(vfs)
    parallel = collect_system_snapshot(vfs, Settings(MAX_WORKERS=2))
    assert parallel == serial


def test_bad_history_sentinel_is_epoch_by_default(vfs, evidence_root):
    (evidence_root / "root").mkdir()
    (evidence_root / "root/.bash_history").write_text(BAD_SENTINEL_HISTORY)
    snapshot = collect_system_snapshot(vfs)
    assert snapshot.user("root").bash_history.commands[0].timestamp == EPOCH


def test_strict_failure_aborts_the_batch(vfs, evidence_root):
    (evidence_root / "root").mkdir()
    (evidence_root / "root/.bash_history").write_text(BAD_SENTINEL_HISTORY)
    with pytest.raises(MalformedRecord):
        collect_system_snapshot(vfs, Settings(STRICT_PARSING=True))


def test_isolated_failures_are_recorded(vfs, evidence_root):
    (evidence_root / "root").mkdir()
    (evidence_root / "root/.bash_history").write_text(BAD_SENTINEL_HISTORY)
    snapshot = collect_system_snapshot(vfs, Settings(STRICT_PARSING=True, ISOLATE_USER_FAILURES=True))
    assert [u.user_info.name for u in snapshot.users] == ["syslog", "forensicrs", "gwanza"]
    assert list(snapshot.failures) == ["root"]
    assert "bad timestamp" in snapshot.failures["root"]


class StallingFS(StdVirtualFS):
    """Times out on the first ``stalls`` reads, as a slow evidence share does."""

    def __init__(self, stalls: int):
        self.stalls = stalls
        self.reads = 0

    def read_to_string(self, path):
        self.reads += 1
        if self.reads <= self.stalls:
            raise TimeoutError(f"timed out reading {path}")
        return super().read_to_string(path)


def test_retry_attempts_come_from_the_aggregator_settings(evidence_root):
    backend = StallingFS(stalls=1)
    aggregator = ArtifactAggregator(ChRootFileSystem(evidence_root, backend), Settings(READ_RETRY_ATTEMPTS=1))
    with pytest.raises(StorageUnavailable) as excinfo:
        aggregator.load_users()
    assert excinfo.value.source == "/etc/passwd"
    assert backend.reads == 1


def test_transient_mandatory_read_failures_are_retried(evidence_root):
    backend = StallingFS(stalls=1)
    aggregator = ArtifactAggregator(ChRootFileSystem(evidence_root, backend), Settings(READ_RETRY_ATTEMPTS=2))
    assert [u.name for u in aggregator.load_users()] == ["root", "syslog", "forensicrs", "gwanza"]
    assert backend.reads == 2

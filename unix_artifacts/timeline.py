from typing import Iterable

import pandas as pd

from .models import SystemSnapshot, UserArtifact

TIMELINE_COLUMNS = ["user", "shell", "timestamp", "command", "source"]


def _history_rows(artifacts: Iterable[UserArtifact]):
    for artifact in artifacts:
        name = artifact.user_info.name
        for shell, history in (("bash", artifact.bash_history), ("zsh", artifact.zsh_history)):
            for entry in history.commands:
                yield {
                    "user": name,
                    "shell": shell,
                    "timestamp": entry.timestamp,
                    "command": entry.command,
                    "source": history.source,
                }


def build_history_timeline(snapshot: SystemSnapshot) -> pd.DataFrame:
    """All shell history of all users, oldest first; undated commands last, in log order."""
    df = pd.DataFrame(list(_history_rows(snapshot.users)), columns=TIMELINE_COLUMNS)
    df["timestamp"] = pd.to_datetime(df["timestamp"])
    return df.sort_values("timestamp", kind="stable", na_position="last").reset_index(drop=True)

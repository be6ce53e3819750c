"""
Individual artifact extractors. Each reads through a VirtualFileSystem.
"""
from .authorized_keys import get_authorized_keys
from .bash import load_bash_config, load_bash_history
from .crontab import process_crontab_files, process_system_crontabs
from .group import SystemGroups, process_group_file
from .known_hosts import get_known_hosts
from .passwd import read_passwd
from .services import process_init_services_files, process_services_files, process_user_services
from .zsh import load_zsh_config, load_zsh_history

__all__ = [
    "get_authorized_keys",
    "get_known_hosts",
    "load_bash_config",
    "load_bash_history",
    "load_zsh_config",
    "load_zsh_history",
    "process_crontab_files",
    "process_system_crontabs",
    "process_group_file",
    "SystemGroups",
    "read_passwd",
    "process_init_services_files",
    "process_services_files",
    "process_user_services",
]

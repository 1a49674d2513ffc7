"""Mount definition model and unit file codec.

A mount definition is the declarative half of a mount: the What/Where/
Type/Options quadruple kept as a ``<name>.mount`` file in the definition
directory. This module parses and renders that INI-like format and holds
the validation rules shared by the reconciler and lifecycle operations.
"""

import configparser
import dataclasses
import posixpath
import re
from dataclasses import dataclass

from mountctl.core.errors import InvalidDefinition, InvalidName

MOUNT_SUFFIX = ".mount"
AUTOMOUNT_SUFFIX = ".automount"

DEFAULT_TYPE = "auto"
DEFAULT_OPTIONS = "defaults"
DEFAULT_WANTED_BY = "multi-user.target"

NAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")

# Mounting over one of these would shadow part of the running system.
RESERVED_TARGETS: frozenset[str] = frozenset(
    {
        "/",
        "/bin",
        "/boot",
        "/dev",
        "/etc",
        "/home",
        "/lib",
        "/lib64",
        "/opt",
        "/proc",
        "/root",
        "/run",
        "/sbin",
        "/srv",
        "/sys",
        "/tmp",
        "/usr",
        "/var",
    }
)


def validate_name(name: str) -> str:
    """Check that a mount name is safe to use as a unit file stem.

    Args:
        name: Candidate mount name.

    Returns:
        The name, unchanged.

    Raises:
        InvalidName: If the name is empty or contains other characters
            than letters, digits, underscore, dot and dash.
    """
    if not name or not NAME_PATTERN.match(name) or name in (".", ".."):
        msg = f"Invalid mount name '{name}': only letters, digits, '_', '.' and '-' are allowed"
        raise InvalidName(msg)
    return name


def normalize_target(where: str) -> str:
    """Normalize an absolute target path for comparisons."""
    return "/" + posixpath.normpath(where).lstrip("/")


def is_reserved_target(where: str) -> bool:
    """Check whether a Where= path is one of the reserved system directories.

    Args:
        where: Absolute target path.

    Returns:
        True if mounting at this path is refused.
    """
    if not where.startswith("/"):
        return False
    return normalize_target(where) in RESERVED_TARGETS


def systemd_unit_name_for(where: str) -> str:
    """Compute the unit stem systemd expects for a mount point.

    systemd refuses to load a mount unit whose file name does not match
    the escaped Where= path (``systemd-escape --path``).

    Args:
        where: Absolute target path.

    Returns:
        Escaped unit stem, e.g. ``custom\\x2dmounts-nas1``.
    """
    path = posixpath.normpath(where).strip("/")
    if not path:
        return "-"

    escaped: list[str] = []
    for index, char in enumerate(path):
        if char == "/":
            escaped.append("-")
        elif (char.isascii() and (char.isalnum() or char == "_")) or (char == "." and index > 0):
            escaped.append(char)
        else:
            escaped.extend(f"\\x{byte:02x}" for byte in char.encode())
    return "".join(escaped)


def suggest_where(what: str, mount_base: str) -> str:
    """Suggest a mount target for a source below the mount base.

    Args:
        what: Mount source, e.g. ``//nas/share`` or ``host:/export``.
        mount_base: Base directory for new mount points.

    Returns:
        ``<mount_base>/<last component of what>``, or the base itself
        if no usable component exists.
    """
    source = what.rstrip("/")
    if ":" in source and not source.startswith("/"):
        source = source.split(":", 1)[1].rstrip("/")
    leaf = posixpath.basename(source)
    if not leaf:
        return mount_base
    return posixpath.join(mount_base, leaf)


@dataclass(frozen=True, slots=True)
class MountDefinition:
    """Declared mount, identified by its name (the unit file stem).

    Attributes:
        name: Mount name, also the ``<name>.mount`` file stem.
        what: Mount source (device, ``//host/share``, ``host:/export``).
        where: Absolute mount target.
        type: Filesystem type passed to mount(8).
        options: Comma-separated mount options.
        description: Unit description; a default is rendered when None.
    """

    name: str
    what: str
    where: str
    type: str = DEFAULT_TYPE
    options: str = DEFAULT_OPTIONS
    description: str | None = None

    @property
    def unit_name(self) -> str:
        """Full systemd unit name of the mount."""
        return f"{self.name}{MOUNT_SUFFIX}"

    @property
    def automount_unit_name(self) -> str:
        """Full systemd unit name of the companion automount."""
        return f"{self.name}{AUTOMOUNT_SUFFIX}"

    @property
    def credentials_path(self) -> str | None:
        """Path referenced by a ``credentials=`` mount option, if any."""
        for option in self.options.split(","):
            key, _, value = option.strip().partition("=")
            if key in ("credentials", "cred") and value:
                return value
        return None

    def structural_problems(self) -> list[str]:
        """List problems that make the definition unusable as a unit.

        Returns:
            Empty list if What= and Where= are present and Where= is absolute.
        """
        problems: list[str] = []
        if not self.what.strip():
            problems.append("What= is missing or empty")
        if not self.where.strip():
            problems.append("Where= is missing or empty")
        elif not self.where.startswith("/"):
            problems.append(f"Where= must be an absolute path, got '{self.where}'")
        return problems

    def problems(self) -> list[str]:
        """List every validation problem including the reserved-target rule."""
        problems = self.structural_problems()
        if self.where and is_reserved_target(self.where):
            problems.append(f"Where={self.where} is a reserved system path")
        return problems

    @property
    def is_valid(self) -> bool:
        """Check if the definition passes all validation rules."""
        return not self.problems()

    def validate(self) -> "MountDefinition":
        """Raise if the definition is not usable.

        Raises:
            InvalidDefinition: With the list of problems attached.
        """
        problems = self.problems()
        if problems:
            msg = f"Invalid definition for '{self.name}': {'; '.join(problems)}"
            raise InvalidDefinition(msg, problems)
        return self

    def with_changes(self, **changes: str | None) -> "MountDefinition":
        """Return a copy with the given non-None fields replaced."""
        updates = {key: value for key, value in changes.items() if value is not None}
        # A generated description follows the target
        if "where" in updates and self.description == f"Mount for {self.where}":
            updates["description"] = None
        return dataclasses.replace(self, **updates)

    def render(self) -> str:
        """Render the definition as systemd mount unit text."""
        description = self.description or f"Mount for {self.where}"
        return (
            "[Unit]\n"
            f"Description={description}\n"
            "\n"
            "[Mount]\n"
            f"What={self.what}\n"
            f"Where={self.where}\n"
            f"Type={self.type or DEFAULT_TYPE}\n"
            f"Options={self.options or DEFAULT_OPTIONS}\n"
            "\n"
            "[Install]\n"
            f"WantedBy={DEFAULT_WANTED_BY}\n"
        )

    def render_automount(self) -> str:
        """Render the companion automount unit for this definition."""
        return (
            "[Unit]\n"
            f"Description=Automount for {self.where}\n"
            "\n"
            "[Automount]\n"
            f"Where={self.where}\n"
            "\n"
            "[Install]\n"
            f"WantedBy={DEFAULT_WANTED_BY}\n"
        )


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        interpolation=None,
        strict=False,
        delimiters=("=",),
        comment_prefixes=("#", ";"),
        empty_lines_in_values=False,
    )
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    return parser


def parse_unit_text(name: str, text: str) -> MountDefinition:
    """Parse mount unit text into a definition.

    A missing ``[Mount]`` section or missing keys do not raise; the
    resulting definition simply reports structural problems.

    Args:
        name: Mount name (file stem).
        text: Unit file content.

    Returns:
        Parsed MountDefinition.

    Raises:
        InvalidDefinition: If the text is not in unit file format at all.
    """
    parser = _new_parser()
    try:
        parser.read_string(text)
    except configparser.Error as e:
        msg = f"Malformed unit file for '{name}': {e}"
        raise InvalidDefinition(msg, [str(e)]) from e

    mount = parser["Mount"] if parser.has_section("Mount") else {}
    unit = parser["Unit"] if parser.has_section("Unit") else {}

    return MountDefinition(
        name=name,
        what=mount.get("What", "").strip(),
        where=mount.get("Where", "").strip(),
        type=mount.get("Type", "").strip() or DEFAULT_TYPE,
        options=mount.get("Options", "").strip() or DEFAULT_OPTIONS,
        description=unit.get("Description", "").strip() or None,
    )



def unit_where(text: str) -> str | None:
    """Read ``Where=`` from mount or automount unit text.

    Returns:
        The target path, or None if the text has none or cannot be parsed.
    """
    parser = _new_parser()
    try:
        parser.read_string(text)
    except configparser.Error:
        return None
    for section in ("Mount", "Automount"):
        if parser.has_section(section):
            where = parser[section].get("Where", "").strip()
            if where:
                return normalize_target(where)
    return None

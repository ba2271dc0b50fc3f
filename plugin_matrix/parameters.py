import yaml
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .logger_setup import logger

PARAMS_FILE_ENV_VAR = "PLUGIN_MATRIX_PARAMS"
# BaseLoader leaves YAML nulls as their literal spelling.
YAML_NULLS = {"null", "Null", "NULL", "~"}

# (name, default, description); a default of None means no default.
KNOWN_PARAMETERS: List[Tuple[str, Optional[str], str]] = [
    ("vcs.name", None, "VCS root identity and display name (required)"),
    ("vcs.url", None, "Repository URL"),
    ("vcs.branch", "master", "Primary branch"),
    ("vcs.branches", None, "Additional branches, comma separated"),
    ("vcs.auth.method", "anonymous", "anonymous | uploadedkey | password"),
    ("vcs.auth.username", None, "Username for uploadedkey/password authentication"),
    ("vcs.auth.uploadedkey", None, "Name of the uploaded SSH key"),
    ("vcs.auth.passphrase", None, "Passphrase for the uploaded SSH key"),
    ("vcs.auth.password", None, "Password for password authentication"),
    ("java.home", "%java8.home%", "JDK home reference used by the build step"),
    ("teamcity.api.versions", None, "Target API versions, comma separated (required)"),
    ("gradle.tasks", None, "Task list override for every version build"),
    ("gradle.options", None, "Extra Gradle options for every build"),
    ("artifact.paths", "build/distributions/*.zip", "Artifact rules for the first build"),
    ("report.task", "sonar", "Code quality task run by the report build"),
    ("agent.requirements", None, "Agent requirements, comma separated [buildId=]name tokens"),
]


def _flatten(data: Mapping, prefix: str = "") -> Dict[str, str]:
    flat: Dict[str, str] = {}
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(_flatten(value, prefix=f"{name}."))
        elif isinstance(value, (list, tuple)):
            flat[name] = ",".join(str(v) for v in value)
        elif value in YAML_NULLS:
            flat[name] = ""
        else:
            flat[name] = str(value)
    return flat


class ParameterSource:
    """Read-only lookup of the named string parameters driving a generation run."""

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self._values: Dict[str, str] = dict(values or {})

    def get(self, name: str, default: Optional[str] = None) -> str:
        if name in self._values:
            return self._values[name]
        return default if default is not None else ""

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def names(self) -> List[str]:
        return sorted(self._values)

    def merged(self, overrides: Mapping[str, str]) -> 'ParameterSource':
        values = dict(self._values)
        values.update(overrides)
        return ParameterSource(values)

    @classmethod
    def from_yaml(cls, file_path: Path) -> 'ParameterSource':
        with open(file_path, 'r', encoding='utf-8') as f:
            # BaseLoader keeps every scalar a string, so 2022.10 stays "2022.10".
            data = yaml.load(f, Loader=yaml.BaseLoader)
        if data is None:
            logger.warning(f"Parameters file {file_path} is empty.")
            return cls()
        if not isinstance(data, Mapping):
            raise ValueError(
                f"Parameters file {Path(file_path).name} must contain a mapping of parameter names to values. "
                f"Found type: {type(data).__name__}"
            )
        values = _flatten(data)
        logger.debug(f"Loaded {len(values)} parameters from {file_path}")
        return cls(values)


def parse_parameter_overrides(items: Iterable[str]) -> Dict[str, str]:
    """Parses KEY=VALUE strings; the value keeps everything after the first '='."""
    overrides: Dict[str, str] = {}
    for item in items:
        if "=" not in item:
            raise ValueError(f"Invalid parameter format '{item}'. Use KEY=VALUE.")
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError(f"Invalid parameter format '{item}'. Parameter name is empty.")
        overrides[key] = value
    return overrides

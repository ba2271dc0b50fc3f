import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Optional, Union

class CheckoutPolicy(Enum):
    AUTO = "AUTO"
    USE_MIRRORS = "USE_MIRRORS"
    NO_MIRRORS = "NO_MIRRORS"
    SHALLOW_CLONE = "SHALLOW_CLONE"

class AuthMethodType(Enum):
    ANONYMOUS = "anonymous"
    UPLOADED_KEY = "uploadedkey"
    PASSWORD = "password"

class RequirementName(Enum):
    LINUX = "linux"
    MACOS = "macos"
    SOLARIS = "solaris"
    WINDOWS = "windows"
    DOCKER = "docker"


def to_id(name: str) -> str:
    """Turns a display name into an identifier, e.g. 'test-git-repo' -> 'TestGitRepo'."""
    words = [w for w in re.split(r'[^0-9A-Za-z]+', name) if w]
    result = ''.join(w[0].upper() + w[1:] for w in words)
    if result and result[0].isdigit():
        result = '_' + result
    return result


@dataclass(frozen=True)
class RelativeId:
    value: str

    def qualified(self, project_id: Optional[str] = None) -> str:
        if project_id:
            return f"{project_id}_{self.value}"
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Parameter:
    name: str
    value: str

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.value}


class ParameterSet:
    """Ordered parameters with unique names. Re-adding a name replaces its value in place."""

    def __init__(self, params: Optional[List[Parameter]] = None):
        self.params: List[Parameter] = []
        for p in params or []:
            self.param(p.name, p.value)

    def param(self, name: str, value: str):
        for index, existing in enumerate(self.params):
            if existing.name == name:
                self.params[index] = Parameter(name, value)
                return
        self.params.append(Parameter(name, value))

    def get(self, name: str) -> Optional[str]:
        for p in self.params:
            if p.name == name:
                return p.value
        return None

    def merged_with(self, overrides: 'ParameterSet') -> 'ParameterSet':
        merged = ParameterSet(self.params)
        for p in overrides.params:
            merged.param(p.name, p.value)
        return merged

    def __len__(self) -> int:
        return len(self.params)

    def __iter__(self):
        return iter(self.params)

    def __eq__(self, other) -> bool:
        return isinstance(other, ParameterSet) and self.params == other.params

    def to_dict(self) -> Dict[str, str]:
        return {p.name: p.value for p in self.params}


# --- Authentication variants ---

@dataclass(frozen=True)
class Anonymous:
    def to_dict(self) -> dict:
        return {"type": AuthMethodType.ANONYMOUS.value}

@dataclass(frozen=True)
class UploadedKey:
    username: Optional[str] = None
    uploaded_key: Optional[str] = None
    passphrase: Optional[str] = None

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {"type": AuthMethodType.UPLOADED_KEY.value}
        if self.username is not None:
            data["username"] = self.username
        if self.uploaded_key is not None:
            data["uploaded_key"] = self.uploaded_key
        if self.passphrase is not None:
            data["passphrase"] = self.passphrase
        return data

@dataclass(frozen=True)
class Password:
    username: Optional[str] = None
    password: Optional[str] = None

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {"type": AuthMethodType.PASSWORD.value}
        if self.username is not None:
            data["username"] = self.username
        if self.password is not None:
            data["password"] = self.password
        return data

AuthMethod = Union[Anonymous, UploadedKey, Password]


@dataclass
class VcsRoot:
    id: RelativeId
    name: str
    url: str
    branch: str
    branch_spec: List[str] = field(default_factory=list)
    use_tags_as_branches: bool = True
    checkout_policy: CheckoutPolicy = CheckoutPolicy.NO_MIRRORS
    auth_method: AuthMethod = field(default_factory=Anonymous)

    @property
    def branch_spec_text(self) -> str:
        return "\n".join(self.branch_spec)

    def to_dict(self, project_id: Optional[str] = None) -> dict:
        return {
            "id": self.id.qualified(project_id),
            "name": self.name,
            "url": self.url,
            "branch": self.branch,
            "branch_spec": self.branch_spec_text,
            "use_tags_as_branches": self.use_tags_as_branches,
            "checkout_policy": self.checkout_policy.value,
            "auth_method": self.auth_method.to_dict(),
        }


@dataclass
class GradleStep:
    id: str
    tasks: str
    gradle_params: str
    jdk_home: str
    use_gradle_wrapper: bool = True
    enable_stacktrace: bool = True

    def to_dict(self) -> dict:
        return {
            "type": "gradle",
            "id": self.id,
            "tasks": self.tasks,
            "gradle_params": self.gradle_params,
            "jdk_home": self.jdk_home,
            "use_gradle_wrapper": self.use_gradle_wrapper,
            "enable_stacktrace": self.enable_stacktrace,
        }

@dataclass
class VcsTrigger:
    id: str
    branch_filter: str = ""
    trigger_rules: List[str] = field(default_factory=list)

    @property
    def trigger_rules_text(self) -> str:
        return "\n".join(self.trigger_rules)

    def to_dict(self) -> dict:
        return {
            "type": "vcs",
            "id": self.id,
            "branch_filter": self.branch_filter,
            "trigger_rules": self.trigger_rules_text,
        }

@dataclass
class Feature:
    id: str
    type: str

    def to_dict(self) -> dict:
        return {"id": self.id, "type": self.type}


@dataclass
class Template:
    id: RelativeId
    name: str
    vcs_roots: List[VcsRoot] = field(default_factory=list)
    steps: List[GradleStep] = field(default_factory=list)
    triggers: List[VcsTrigger] = field(default_factory=list)
    execution_timeout_min: int = 0
    features: List[Feature] = field(default_factory=list)
    params: ParameterSet = field(default_factory=ParameterSet)

    def to_dict(self, project_id: Optional[str] = None) -> dict:
        return {
            "id": self.id.qualified(project_id),
            "name": self.name,
            "vcs": [root.id.qualified(project_id) for root in self.vcs_roots],
            "steps": [s.to_dict() for s in self.steps],
            "triggers": [t.to_dict() for t in self.triggers],
            "failure_conditions": {"execution_timeout_min": self.execution_timeout_min},
            "features": [f.to_dict() for f in self.features],
            "params": self.params.to_dict(),
        }


# --- Requirement variants ---

@dataclass(frozen=True)
class Contains:
    name: str
    value: str

    def describe(self) -> str:
        return f"{self.name} contains '{self.value}'"

    def to_dict(self) -> dict:
        return {"type": "contains", "name": self.name, "value": self.value}

@dataclass(frozen=True)
class Exists:
    name: str

    def describe(self) -> str:
        return f"{self.name} exists"

    def to_dict(self) -> dict:
        return {"type": "exists", "name": self.name}

Requirement = Union[Contains, Exists]


@dataclass
class BuildDefinition:
    id: RelativeId
    name: str
    templates: List[Template] = field(default_factory=list)
    artifact_rules: Optional[str] = None
    params: ParameterSet = field(default_factory=ParameterSet)
    requirements: List[Requirement] = field(default_factory=list)

    def effective_parameters(self) -> ParameterSet:
        """Template defaults with this build's overrides applied on top."""
        merged = ParameterSet()
        for template in self.templates:
            merged = merged.merged_with(template.params)
        return merged.merged_with(self.params)

    def to_dict(self, project_id: Optional[str] = None) -> dict:
        data: Dict[str, Any] = {
            "id": self.id.qualified(project_id),
            "name": self.name,
            "templates": [t.id.qualified(project_id) for t in self.templates],
        }
        if self.artifact_rules is not None:
            data["artifact_rules"] = self.artifact_rules
        data["params"] = self.params.to_dict()
        data["requirements"] = [r.to_dict() for r in self.requirements]
        return data


@dataclass
class Project:
    id: Optional[str] = None
    version: str = ""
    params: ParameterSet = field(default_factory=ParameterSet)
    vcs_roots: List[VcsRoot] = field(default_factory=list)
    templates: List[Template] = field(default_factory=list)
    build_types: List[BuildDefinition] = field(default_factory=list)
    build_types_order: List[BuildDefinition] = field(default_factory=list)

    def vcs_root(self, root: VcsRoot) -> VcsRoot:
        self.vcs_roots.append(root)
        return root

    def template(self, template: Template) -> Template:
        self.templates.append(template)
        return template

    def build_type(self, build: BuildDefinition) -> BuildDefinition:
        self.build_types.append(build)
        return build

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "project": {
                "id": self.id,
                "params": self.params.to_dict(),
                "vcs_roots": [r.to_dict(self.id) for r in self.vcs_roots],
                "templates": [t.to_dict(self.id) for t in self.templates],
                "build_types": [b.to_dict(self.id) for b in self.build_types],
                "build_types_order": [b.id.qualified(self.id) for b in self.build_types_order],
            },
        }

from typing import Callable, Dict, List, Optional

from .errors import InvalidEnumValue, MissingRequiredInput
from .logger_setup import logger
from .models import (
    Anonymous, AuthMethod, AuthMethodType, CheckoutPolicy, Password, Project,
    RelativeId, UploadedKey, VcsRoot, to_id,
)
from .parameters import ParameterSource

DEFAULT_BRANCH = "master"
DEFAULT_AUTH_METHOD = AuthMethodType.ANONYMOUS.value
TAGS_BRANCH_SPEC = "+:refs/tags/(*)"


def _optional(value: str) -> Optional[str]:
    # Blank credentials stay unset rather than becoming empty strings.
    return value if value.strip() else None


def branch_specification(branch: str, additional_branches: str) -> List[str]:
    branches = [branch]
    branches.extend(b.strip() for b in additional_branches.split(",") if b.strip())
    spec = [f"+:refs/heads/({b})" for b in branches]
    spec.append(TAGS_BRANCH_SPEC)
    return spec


def _anonymous(params: ParameterSource) -> AuthMethod:
    return Anonymous()

def _uploaded_key(params: ParameterSource) -> AuthMethod:
    return UploadedKey(
        username=_optional(params.get("vcs.auth.username", "")),
        uploaded_key=_optional(params.get("vcs.auth.uploadedkey", "")),
        passphrase=_optional(params.get("vcs.auth.passphrase", "")),
    )

def _password(params: ParameterSource) -> AuthMethod:
    return Password(
        username=_optional(params.get("vcs.auth.username", "")),
        password=_optional(params.get("vcs.auth.password", "")),
    )

AUTH_METHOD_BUILDERS: Dict[AuthMethodType, Callable[[ParameterSource], AuthMethod]] = {
    AuthMethodType.ANONYMOUS: _anonymous,
    AuthMethodType.UPLOADED_KEY: _uploaded_key,
    AuthMethodType.PASSWORD: _password,
}


def configure_authentication(params: ParameterSource) -> AuthMethod:
    method = params.get("vcs.auth.method", DEFAULT_AUTH_METHOD)
    try:
        method_type = AuthMethodType(method.strip())
    except ValueError:
        raise InvalidEnumValue(f"Invalid authentication method: {method}")
    return AUTH_METHOD_BUILDERS[method_type](params)


def create_vcs_root(project: Project, params: ParameterSource) -> VcsRoot:
    """Builds the git VCS root from the vcs.* parameters and registers it on the project."""
    vcs_name = params.get("vcs.name")
    if not vcs_name.strip():
        raise MissingRequiredInput("Empty VCS name")
    vcs_branch = params.get("vcs.branch", DEFAULT_BRANCH)

    vcs_root = VcsRoot(
        id=RelativeId(to_id(vcs_name)),
        name=vcs_name,
        url=params.get("vcs.url"),
        branch=f"refs/heads/{vcs_branch}",
        branch_spec=branch_specification(vcs_branch, params.get("vcs.branches", "")),
        use_tags_as_branches=True,
        checkout_policy=CheckoutPolicy.NO_MIRRORS,
        auth_method=configure_authentication(params),
    )
    project.vcs_root(vcs_root)
    logger.debug(f"Created VCS root {vcs_root.id} for {vcs_root.url or '<no url>'} "
                 f"(branch: {vcs_branch}, auth: {type(vcs_root.auth_method).__name__})")
    return vcs_root

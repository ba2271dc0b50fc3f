from typing import Callable, Dict, List

from .errors import InvalidEnumValue, InvalidReference
from .logger_setup import logger
from .models import BuildDefinition, Contains, Exists, RelativeId, Requirement, RequirementName
from .parameters import ParameterSource

OS_NAME_PROPERTY = "teamcity.agent.jvm.os.name"
DOCKER_VERSION_PROPERTY = "docker.server.version"

REQUIREMENT_FACTORIES: Dict[RequirementName, Callable[[], Requirement]] = {
    RequirementName.LINUX: lambda: Contains(OS_NAME_PROPERTY, "Linux"),
    RequirementName.MACOS: lambda: Contains(OS_NAME_PROPERTY, "Mac OS X"),
    RequirementName.SOLARIS: lambda: Contains(OS_NAME_PROPERTY, "SunOS"),
    RequirementName.WINDOWS: lambda: Contains(OS_NAME_PROPERTY, "Windows"),
    RequirementName.DOCKER: lambda: Exists(DOCKER_VERSION_PROPERTY),
}


def requirement_for(name: str) -> Requirement:
    try:
        requirement_name = RequirementName(name)
    except ValueError:
        raise InvalidEnumValue(f"Invalid requirement: {name}")
    return REQUIREMENT_FACTORIES[requirement_name]()


def configure_requirements(builds: List[BuildDefinition], params: ParameterSource):
    """
    Applies agent.requirements to already generated builds.

    Each comma separated token is either a requirement name, applied to every
    build, or 'buildId=name', applied to the build with that id only. Unknown
    names and unknown build ids abort the run.
    """
    requirements = params.get("agent.requirements", "")
    if not requirements.strip():
        return

    build_ids = [build.id for build in builds]
    for token in requirements.split(","):
        parts = token.split("=")
        name = parts[-1].strip()
        build_id = parts[0].strip() if len(parts) > 1 else ""

        if build_id and RelativeId(build_id) not in build_ids:
            raise InvalidReference(f"Invalid build id: {build_id}")
        requirement = requirement_for(name)

        for build in builds:
            if not build_id or build.id == RelativeId(build_id):
                build.requirements.append(requirement)
                logger.debug(f"Added requirement '{name}' to build {build.id}")

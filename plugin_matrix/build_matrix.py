from typing import List

from .errors import MissingRequiredInput
from .logger_setup import logger
from .models import BuildDefinition, Project, RelativeId, Template
from .parameters import ParameterSource

DEFAULT_ARTIFACT_PATHS = "build/distributions/*.zip"
DEFAULT_REPORT_TASK = "sonar"
REPORT_BUILD_ID = "ReportCodeQuality"
REPORT_BUILD_NAME = "Report - Code Quality"


def create_api_build_configurations(project: Project, template: Template,
                                    params: ParameterSource) -> List[BuildDefinition]:
    """One build per entry of teamcity.api.versions, numbered Build1..BuildN in input order."""
    api_versions = params.get("teamcity.api.versions")
    if not api_versions.strip():
        raise MissingRequiredInput("Empty API versions list")

    gradle_tasks = params.get("gradle.tasks", "")
    gradle_options = params.get("gradle.options", "")
    builds: List[BuildDefinition] = []
    for index, entry in enumerate(api_versions.split(",")):
        version = entry.strip()
        build = BuildDefinition(
            id=RelativeId(f"Build{index + 1}"),
            name=f"Build - TeamCity {version}",
            templates=[template],
        )
        # Only the first build publishes artifacts.
        if index == 0:
            build.artifact_rules = params.get("artifact.paths", DEFAULT_ARTIFACT_PATHS)
        build.params.param("gradle.opts", f"-Pteamcity.api.version={version} {gradle_options}".strip())
        if gradle_tasks:
            build.params.param("gradle.tasks", gradle_tasks)

        project.build_type(build)
        builds.append(build)
        logger.debug(f"Created build {build.id} for API version {version}")
    return builds


def create_report_build_configuration(project: Project, template: Template,
                                      params: ParameterSource) -> BuildDefinition:
    gradle_options = params.get("gradle.options", "")
    report_task = params.get("report.task", DEFAULT_REPORT_TASK)

    build = BuildDefinition(
        id=RelativeId(REPORT_BUILD_ID),
        name=REPORT_BUILD_NAME,
        templates=[template],
    )
    build.params.param("gradle.opts", f"%report.opts% {gradle_options}".strip())
    build.params.param("gradle.tasks", f"clean build {report_task}")
    project.build_type(build)
    logger.debug(f"Created report build {build.id} running '{report_task}'")
    return build

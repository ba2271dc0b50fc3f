import json
import yaml
from typing import Optional

from .agent_requirements import configure_requirements
from .build_matrix import create_api_build_configurations, create_report_build_configuration
from .logger_setup import logger
from .models import Project
from .parameters import ParameterSource
from .template import default_plugin_build_template
from .vcs_root import create_vcs_root

SETTINGS_VERSION = "2025.11"
OUTPUT_FORMATS = ("yaml", "json")


def generate_project(params: ParameterSource, project_id: Optional[str] = None) -> Project:
    """
    Runs a full generation pass: VCS root, template, version builds, report
    build, then agent requirements. Any configuration error propagates and no
    project is returned.
    """
    project = Project(id=project_id, version=SETTINGS_VERSION)
    project.params.param("teamcity.ui.settings.readOnly", "true")

    vcs_root = create_vcs_root(project, params)
    build_template = default_plugin_build_template(project, vcs_root, params)

    builds = create_api_build_configurations(project, build_template, params)
    builds.append(create_report_build_configuration(project, build_template, params))

    configure_requirements(builds, params)

    project.build_types_order = list(builds)
    logger.info(f"Generated {len(builds)} builds for VCS root {vcs_root.id}: "
                f"{', '.join(str(b.id) for b in builds)}")
    return project


def render_project(project: Project, fmt: str = "yaml") -> str:
    data = project.to_dict()
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)
    if fmt == "json":
        return json.dumps(data, indent=2) + "\n"
    raise ValueError(f"Unsupported output format '{fmt}'. Use one of: {', '.join(OUTPUT_FORMATS)}")

from .logger_setup import logger
from .models import Feature, GradleStep, ParameterSet, Project, RelativeId, Template, VcsRoot, VcsTrigger
from .parameters import ParameterSource

TEMPLATE_ID = "Build"
TEMPLATE_NAME = "build plugin"
DEFAULT_JAVA_HOME = "%java8.home%"
DEFAULT_GRADLE_TASKS = "clean build"
DEFAULT_GRADLE_OPTS = ""
EXECUTION_TIMEOUT_MIN = 15
TRIGGER_RULES = [
    "-:.github/**",
    "-:README.adoc",
]


def default_plugin_build_template(project: Project, vcs_root: VcsRoot, params: ParameterSource) -> Template:
    """
    Creates the template every generated build is attached to.

    The Gradle step only references %gradle.tasks%, %gradle.opts% and
    %java.home%, so builds change what runs by overriding those parameters.
    """
    defaults = ParameterSet()
    defaults.param("gradle.opts", DEFAULT_GRADLE_OPTS)
    defaults.param("gradle.tasks", DEFAULT_GRADLE_TASKS)
    defaults.param("java.home", params.get("java.home", DEFAULT_JAVA_HOME))

    template = Template(
        id=RelativeId(TEMPLATE_ID),
        name=TEMPLATE_NAME,
        vcs_roots=[vcs_root],
        steps=[GradleStep(
            id="GradleBuild",
            tasks="%gradle.tasks%",
            gradle_params="%gradle.opts%",
            jdk_home="%java.home%",
            use_gradle_wrapper=True,
            enable_stacktrace=True,
        )],
        triggers=[VcsTrigger(id="vcsTrigger", branch_filter="", trigger_rules=list(TRIGGER_RULES))],
        execution_timeout_min=EXECUTION_TIMEOUT_MIN,
        features=[Feature(id="perfmon", type="perfmon")],
        params=defaults,
    )
    project.template(template)
    logger.debug(f"Created template '{template.name}' using VCS root {vcs_root.id}")
    return template

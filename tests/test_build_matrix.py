"""Tests for the per-version build matrix and the code quality report build."""

import pytest

from plugin_matrix.build_matrix import create_api_build_configurations, create_report_build_configuration
from plugin_matrix.errors import MissingRequiredInput
from plugin_matrix.models import Parameter, Project, RelativeId, Template
from plugin_matrix.parameters import ParameterSource


@pytest.fixture
def template():
    return Template(id=RelativeId("Build"), name="build plugin")


def api_builds(values, template):
    return create_api_build_configurations(Project(), template, ParameterSource(values))


def assert_build(build, build_id, version):
    assert build.id == RelativeId(build_id)
    assert build.name == f"Build - TeamCity {version}"
    assert list(build.params) == [Parameter("gradle.opts", f"-Pteamcity.api.version={version}")]


class TestApiBuildConfigurations:
    """Builds created from teamcity.api.versions."""

    @pytest.mark.parametrize("versions", ["", "   "])
    def test_empty_api_versions(self, template, versions):
        with pytest.raises(MissingRequiredInput) as exc_info:
            api_builds({"teamcity.api.versions": versions}, template)
        assert str(exc_info.value) == "Empty API versions list"

    def test_missing_api_versions(self, template):
        with pytest.raises(MissingRequiredInput, match="Empty API versions list"):
            api_builds({}, template)

    def test_single_api_version(self, template):
        builds = api_builds({"teamcity.api.versions": "2025.03"}, template)
        assert len(builds) == 1
        assert_build(builds[0], "Build1", "2025.03")
        assert builds[0].artifact_rules == "build/distributions/*.zip"

    def test_multiple_api_versions(self, template):
        builds = api_builds({"teamcity.api.versions": "2018.1,2022.04,2025.03"}, template)
        assert len(builds) == 3
        assert_build(builds[0], "Build1", "2018.1")
        assert_build(builds[1], "Build2", "2022.04")
        assert_build(builds[2], "Build3", "2025.03")

    def test_strip_spaces_from_api_versions(self, template):
        builds = api_builds({"teamcity.api.versions": "2018.1 , 2022.04, 2025.03 "}, template)
        assert_build(builds[0], "Build1", "2018.1")
        assert_build(builds[1], "Build2", "2022.04")
        assert_build(builds[2], "Build3", "2025.03")

    @pytest.mark.parametrize("count", [1, 2, 5])
    def test_only_first_build_has_artifact_rules(self, template, count):
        versions = ",".join(f"20{20 + i}.1" for i in range(count))
        builds = api_builds({"teamcity.api.versions": versions}, template)
        assert [b.id.value for b in builds] == [f"Build{i + 1}" for i in range(count)]
        assert builds[0].artifact_rules is not None
        assert all(b.artifact_rules is None for b in builds[1:])

    def test_alternative_artifact_paths(self, template):
        builds = api_builds({"teamcity.api.versions": "2025.03", "artifact.paths": "build/libs/*.jar"}, template)
        assert builds[0].artifact_rules == "build/libs/*.jar"

    def test_optional_tasks_keep_raw_value(self, template):
        builds = api_builds({"teamcity.api.versions": "2025.03,2025.07", "gradle.tasks": " clean build sonar"}, template)
        for build in builds:
            assert len(build.params) == 2
            assert build.params.params[1] == Parameter("gradle.tasks", " clean build sonar")

    def test_additional_gradle_options(self, template):
        builds = api_builds({"teamcity.api.versions": "2025.03", "gradle.options": "-Ptest=value"}, template)
        assert list(builds[0].params) == [Parameter("gradle.opts", "-Pteamcity.api.version=2025.03 -Ptest=value")]

    def test_uses_template(self, template):
        build = api_builds({"teamcity.api.versions": "2025.03"}, template)[0]
        assert len(build.templates) == 1
        assert build.templates[0] is template

    def test_effective_parameters_override_template_defaults(self):
        template = Template(id=RelativeId("Build"), name="build plugin")
        template.params.param("gradle.opts", "")
        template.params.param("gradle.tasks", "clean build")
        build = api_builds({"teamcity.api.versions": "2025.03"}, template)[0]
        assert build.effective_parameters().to_dict() == {
            "gradle.opts": "-Pteamcity.api.version=2025.03",
            "gradle.tasks": "clean build",
        }


class TestReportBuildConfiguration:
    """The single code quality build."""

    def report_build(self, values, template):
        return create_report_build_configuration(Project(), template, ParameterSource(values))

    def test_report_configuration(self, template):
        build = self.report_build({"dummy.options": "value"}, template)
        assert build.id == RelativeId("ReportCodeQuality")
        assert build.name == "Report - Code Quality"
        assert build.artifact_rules is None
        assert list(build.params) == [
            Parameter("gradle.opts", "%report.opts%"),
            Parameter("gradle.tasks", "clean build sonar"),
        ]

    def test_alternative_report_task(self, template):
        build = self.report_build({"report.task": "checkstyle"}, template)
        assert build.params.params[1] == Parameter("gradle.tasks", "clean build checkstyle")

    def test_additional_gradle_options(self, template):
        build = self.report_build({"gradle.options": "-Ptest=value"}, template)
        assert build.params.params[0] == Parameter("gradle.opts", "%report.opts% -Ptest=value")

    def test_optional_tasks_are_ignored(self, template):
        build = self.report_build({"gradle.tasks": "jar check"}, template)
        assert build.params.get("gradle.tasks") == "clean build sonar"

    def test_uses_template(self, template):
        build = self.report_build({}, template)
        assert build.templates == [template]
        assert build.templates[0] is template


def test_null_gradle_tasks_in_params_file_adds_no_override(tmp_path, template):
    params_file = tmp_path / "params.yaml"
    params_file.write_text("teamcity.api.versions: 2025.03\ngradle.tasks: null\n")
    builds = create_api_build_configurations(Project(), template, ParameterSource.from_yaml(params_file))
    assert builds[0].params.get("gradle.tasks") is None

"""Open or update a GitHub issue describing a failed CI build."""

from __future__ import annotations

import logging
import os
import re
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Sequence
from xml.etree import ElementTree

import requests

logger = logging.getLogger(__name__)

PROJECT_USERNAME_KEY = "CIRCLE_PROJECT_USERNAME"
PROJECT_REPO_NAME_KEY = "CIRCLE_PROJECT_REPONAME"
CIRCLE_BUILD_URL_KEY = "CIRCLE_BUILD_URL"
JOB_NAME_KEY = "CIRCLE_JOB"
GITHUB_API_TOKEN_KEY = "GITHUB_TOKEN"

_REQUIRED_KEYS = (
    PROJECT_USERNAME_KEY,
    PROJECT_REPO_NAME_KEY,
    JOB_NAME_KEY,
    GITHUB_API_TOKEN_KEY,
)

GITHUB_API_URL = "https://api.github.com"

STATUS_PASSED = "passed"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"
STATUS_ERROR = "error"

ISSUE_TITLE_TEMPLATE = "Bug report for failed CircleCI build (job: ${jobName})"
ISSUE_BODY_TEMPLATE = """
Auto-generated report for ${jobName} job build.

Link to failed build: ${linkToBuild}

${failedTests}

**Note**: Information about any subsequent build failures that happen while
this issue is open, will be added as comments with more information to this issue.
"""
ISSUE_COMMENT_TEMPLATE = """
Link to latest failed build: ${linkToBuild}

${failedTests}
"""

_VARIABLE = re.compile(r"\$(?:\{([^}]*)\}|([A-Za-z0-9_]+))")


class IssueGeneratorError(Exception):
    """Raised when the environment, test reports or GitHub fail us."""


@dataclass
class JUnitTest:
    """One test case from a JUnit report."""

    name: str
    classname: str = ""
    status: str = STATUS_PASSED
    message: str = ""


@dataclass
class JUnitSuite:
    """One test suite from a JUnit report."""

    name: str = ""
    tests: list[JUnitTest] = field(default_factory=list)


def _parse_case(element: ElementTree.Element) -> JUnitTest:
    status, message = STATUS_PASSED, ""
    for tag, tag_status in (
        ("failure", STATUS_FAILED),
        ("error", STATUS_ERROR),
        ("skipped", STATUS_SKIPPED),
    ):
        child = element.find(tag)
        if child is not None:
            status = tag_status
            message = child.get("message") or (child.text or "").strip()
            break
    return JUnitTest(
        name=element.get("name", ""),
        classname=element.get("classname", ""),
        status=status,
        message=message,
    )


def parse_junit(path: str) -> list[JUnitSuite]:
    """Read the test suites of the JUnit XML report at path."""
    try:
        root = ElementTree.parse(path).getroot()
    except ElementTree.ParseError as exc:
        raise IssueGeneratorError(f"failed to ingest {path}: {exc}") from exc
    return [
        JUnitSuite(
            name=suite.get("name", ""),
            tests=[_parse_case(case) for case in suite.findall("testcase")],
        )
        for suite in root.iter("testsuite")
    ]


def required_env(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return the required environment variables, raising if any is unset."""
    source = os.environ if environ is None else environ
    env = {key: source.get(key, "") for key in _REQUIRED_KEYS}
    for key, value in env.items():
        if not value:
            raise IssueGeneratorError(f"Required environment variable not set: {key}")
    return env


@dataclass
class ReportGenerator:
    """Reports a failed job as a GitHub issue or as a comment on an open one."""

    env_variables: dict[str, str]
    test_suites: list[JUnitSuite] = field(default_factory=list)
    session: Any = field(default_factory=requests.Session)
    environ: Mapping[str, str] = field(default_factory=lambda: os.environ)
    api_url: str = GITHUB_API_URL

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.env_variables.get(GITHUB_API_TOKEN_KEY, '')}",
            "Accept": "application/vnd.github+json",
        }

    def _issues_url(self) -> str:
        owner = self.env_variables[PROJECT_USERNAME_KEY]
        repo = self.env_variables[PROJECT_REPO_NAME_KEY]
        return f"{self.api_url}/repos/{owner}/{repo}/issues"

    @staticmethod
    def _check(response: Any, expected: int) -> None:
        if response.status_code != expected:
            raise IssueGeneratorError(
                "Unexpected response from GitHub: "
                f"status_code={response.status_code} "
                f"response={response.text} url={response.url}"
            )

    def get_issue_title(self) -> str:
        return ISSUE_TITLE_TEMPLATE.replace(
            "${jobName}", self.env_variables.get(JOB_NAME_KEY, ""), 1
        )

    def get_failed_tests(self) -> str:
        """Return a list of failed tests, or an empty string without reports."""
        if not self.test_suites:
            return ""
        lines = ["#### Test Failures\n"]
        lines += [
            f"-  {test.name}\n"
            for suite in self.test_suites
            for test in suite.tests
            if test.status == STATUS_FAILED
        ]
        return "".join(lines)

    def template_helper(self, param: str) -> str:
        if param == "jobName":
            return "`" + self.env_variables.get(JOB_NAME_KEY, "") + "`"
        if param == "linkToBuild":
            return self.environ.get(CIRCLE_BUILD_URL_KEY, "")
        if param == "failedTests":
            return self.get_failed_tests()
        return ""

    def expand(self, template: str) -> str:
        """Replace every $name and ${name} in template."""
        return _VARIABLE.sub(
            lambda m: self.template_helper(m.group(1) if m.group(1) is not None else m.group(2)),
            template,
        )

    def get_existing_issue(self) -> dict[str, Any] | None:
        """Return the open issue left by an earlier failure of this job, if any."""
        try:
            response = self.session.get(
                self._issues_url(),
                headers=self._headers(),
                params={"state": "open"},
                timeout=30,
            )
        except requests.RequestException as exc:
            raise IssueGeneratorError(f"Failed to search GitHub Issues: {exc}") from exc
        self._check(response, 200)
        title = self.get_issue_title()
        return next((i for i in response.json() if i.get("title") == title), None)

    def create_issue(self) -> dict[str, Any]:
        """Open a new issue for the failure."""
        payload = {
            "title": self.get_issue_title(),
            "body": self.expand(ISSUE_BODY_TEMPLATE),
        }
        try:
            response = self.session.post(
                self._issues_url(), headers=self._headers(), json=payload, timeout=30
            )
        except requests.RequestException as exc:
            raise IssueGeneratorError(f"Failed to create GitHub Issue: {exc}") from exc
        self._check(response, 201)
        return response.json()

    def comment_on_issue(self, issue: Mapping[str, Any]) -> dict[str, Any]:
        """Add a comment about the latest failure to an open issue."""
        payload = {"body": self.expand(ISSUE_COMMENT_TEMPLATE)}
        url = f"{self._issues_url()}/{issue['number']}/comments"
        try:
            response = self.session.post(url, headers=self._headers(), json=payload, timeout=30)
        except requests.RequestException as exc:
            raise IssueGeneratorError(f"Failed to comment on GitHub Issue: {exc}") from exc
        self._check(response, 201)
        return response.json()


def main(argv: Sequence[str] | None = None) -> int:
    """Report the failed build; the optional argument is a JUnit report path."""
    args = list(sys.argv[1:] if argv is None else argv)
    path = args[0] if args else ""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    try:
        env = required_env()
        suites: list[JUnitSuite] = []
        if path:
            logger.info("Ingesting test reports path=%s", path)
            try:
                suites = parse_junit(path)
            except (OSError, IssueGeneratorError) as exc:
                logger.warning(
                    "Failed to ingest JUnit xml, omitting test results from report: %s", exc
                )
        generator = ReportGenerator(env_variables=env, test_suites=suites)

        logger.info("Searching GitHub for existing Issues")
        existing = generator.get_existing_issue()
        if existing is None:
            logger.info("No existing Issues found, creating a new one.")
            created = generator.create_issue()
            logger.info("New GitHub Issue created html_url=%s", created.get("html_url"))
        else:
            logger.info(
                "Updating GitHub Issue with latest failure html_url=%s",
                existing.get("html_url"),
            )
            comment = generator.comment_on_issue(existing)
            logger.info("GitHub Issue updated html_url=%s", comment.get("html_url"))
    except IssueGeneratorError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
# repotools

Command-line tools for keeping a repository with many Go modules,
components and distributions in order:

- **gotmpl** renders a file from a template and JSON data.
- **dbotconf** generates and checks a Dependabot configuration that covers
  every Go module, Dockerfile and `requirements.txt` in the repository.
- **githubgen** writes `.github/CODEOWNERS`, `.github/ALLOWLIST`, the
  component lists in issue templates and per-distribution reports from
  component `metadata.yaml` files.
- **issuegenerator** opens or updates a GitHub issue when a CI job fails,
  listing the failed tests from a JUnit report.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## gotmpl

Renders a template file with data given as JSON and writes the result to a
file. Referring to a key that the data does not have is an error.

```
gotmpl --body in.go.tmpl --data '{"pkg": "myname"}' --out out.go
```

Options: `-b/--body` (template file), `-d/--data` (JSON data),
`-o/--out` (output file). An empty `--body` or `--out` is an error. On any
error the message and the help text are printed and the exit status is 1.

The template language understands `{{.field.path}}`, `{{$.field}}`, `{{.}}`,
literals, `{{if}}`/`{{else}}`/`{{else if}}`/`{{end}}`, `{{range}}`,
`{{with}}`, `{{/* comments */}}` and the `{{-` / `-}}` whitespace trimmers.
It has no functions or pipelines.

From Python, `repotools.gotmpl.render(text, data)` returns the rendered
string and `repotools.gotmpl.gotmpl(body_path, json_data, out_path)` writes
the file, raising `GotmplError` on failure.

## dbotconf

Run from anywhere inside a Git working tree; the repository root is the
nearest directory, at or above the current one, that holds `.git`.

```
dbotconf generate > .github/dependabot.yml
dbotconf verify .github/dependabot.yml
```

`generate` prints a configuration with weekly update checks for GitHub
Actions, each Dockerfile directory, each Go module and each pip
requirements directory. `verify` takes exactly one path and lists every
directory that has no matching update check. On error both print
`dbotconf <command>: <message>` and exit with status 1.

Both commands accept `--ignore` with glob patterns, relative to the
repository root, for paths to skip. The option may be repeated or given
comma-separated values:

```
dbotconf verify --ignore "tools,examples/*" .github/dependabot.yml
```

## githubgen

Scans a folder for `metadata.yaml` files and writes GitHub files from them.
A `distributions.yaml` file must exist in the folder.

```
githubgen --folder . --allowlist cmd/githubgen/allowlist.txt codeowners issue-templates
githubgen --folder . distributions
```

Generators: `issue-templates`, `codeowners`, `distributions`. With none
given, `issue-templates` and `codeowners` run. An unknown generator name
exits with status 2; other errors exit with status 1.

Options (each also accepted with a single dash):

- `--folder`: folder to scan (default `.`)
- `--allowlist`: file listing codeowners allowed outside the organization
- `--skipgithub`: do not check organization membership
- `--default-codeowner`: owner added to every entry
- `--trim-component-suffixes`: `", "`-separated suffixes trimmed from
  component paths in issue templates
- `--github-org`: organization whose members may be codeowners

The `codeowners` generator also fails when an allowlisted name is an
organization member or is not used by any component. Checking membership
reads the organization's members from the GitHub API and needs a personal
access token in the `GITHUB_TOKEN` environment variable.

## issuegenerator

Meant to run as the last step of a failed CI job. It needs the environment
variables `CIRCLE_PROJECT_USERNAME`, `CIRCLE_PROJECT_REPONAME`,
`CIRCLE_JOB` and `GITHUB_TOKEN`, and puts `CIRCLE_BUILD_URL`, if set, into
the report. It comments on the open issue for the job if there is one and
otherwise creates a new issue.

```
issuegenerator path/to/junit-report.xml
```

The report path is optional. Without it, or if the report cannot be read,
the issue carries no list of failed tests.

## Library helpers

- `repotools.repo`: `find_root`, `find_modules` (parsed `go.mod` files as
  `ModFile`), `find_file_pattern_dirs` and `parse_mod_file`.
- `repotools.syncerror.known_sync_error(err)`: tells whether an error from
  syncing a standard stream is one of the harmless, platform-specific ones.

## What it does not do

There is no command for versioning, tagging or releasing sets of modules.
The tools only generate and check files and report CI failures. Nothing
changes `go.mod` versions or creates Git tags.
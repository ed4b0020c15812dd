# deploykit

A command-line tool for building and packaging NPM and Java (Maven, Gradle)
projects, driven by an optional `deploy.yaml` configuration file.

## Installation

```
pip install .
```

This installs the `deploy` command. Running `deploy` with no command prints
the help. The exit status is 0 on success and 1 on any error.

## Commands

### Detect the project type

```
deploy detect                 # current directory
deploy detect ./my-app        # a given directory
deploy detect --path=./my-app
```

Detection looks for `package.json` (NPM), `pom.xml` (Maven) and
`build.gradle` or `build.gradle.kts` (Gradle), in that order; the first match
wins. The command reports the type, the project name (the directory name),
the default build command, every marker file found and a suggested
`deploy build` invocation.

### Create a configuration file

```
deploy init                   # writes ./deploy.yaml
deploy init ./my-app
deploy init --force           # overwrite an existing deploy.yaml
```

The file is written from the built-in defaults, with the project name and
type taken from detection. For Maven projects the Java build tool is set to
`maven`; for Gradle projects to `gradle`, with the build command
`./gradlew clean build`. If no type is detected, the defaults are kept and the
type is recorded as `unknown`. An existing `deploy.yaml` is only replaced with
`--force`.

### Build a project

```
deploy build
deploy build ./my-app
deploy build --type=npm       # npm, maven, gradle or auto (default)
deploy build --output=./dist  # default ./build
deploy build --version=1.0.0  # default is a timestamp such as 20240101-120000
deploy build --skip-tests
```

The builder is always chosen by detecting the project in the given directory;
`--type` is checked against the supported names and reported, and `auto`
fails if nothing is detected. Before building, the tools are checked
(`node` and `npm`, or `java` plus `mvn` or `gradle`/`gradlew`).

- NPM projects run the install command (default `npm ci`) and the build
  command (default `npm run build`), then pack the build directory (default
  `dist`) into `<name>-<version>.tar.gz`.
- Maven projects run the configured Java build command, or
  `mvn clean package` (with `-DskipTests` when `--skip-tests` is given), and
  copy the main JAR found under `target` to `<name>-<version>.jar`.
- Gradle projects run the project's `gradlew` if present, otherwise `gradle`,
  with `clean build` (plus `-x test` for `--skip-tests`), and copy the main
  JAR from `build/libs` to `<name>-<version>.jar`. The tasks are taken from the
  configured build command when the build tool is set to `gradle`.

The main JAR is the first one whose name does not contain `sources`,
`javadoc` or `tests` (nor `plain`, for Gradle). If the configured project name
is empty or `my-app`, the project directory name is used instead.

### Global options

```
deploy --config=path/to/deploy.yaml build
deploy --verbose build        # show the output of the build tools
```

Without `--config`, `deploy.yaml` in the working directory is used; if it is
missing or unreadable, built-in defaults apply.

## Library use

```python
from deploykit.config import get_default_config, load_config, save_config
from deploykit.detector import detect_project, DetectionError
from deploykit.builders.base import BuildOptions, BuildError
from deploykit.builders.factory import build_project, new_builder

info = detect_project("./my-app")          # raises DetectionError if unknown
result = build_project(get_default_config(), BuildOptions(project_path="./my-app"))
print(result.artifact_path, result.size, result.build_time)
```

Build failures raise subclasses of `BuildError` (`ValidationError`,
`BuildFailedError`, `ArtifactNotFoundError`, `UnsupportedProjectTypeError`);
configuration problems raise `ConfigError`. `deploykit.utils` offers helpers
such as `format_file_size` and `sanitize_file_name`.

## What it does not do

deploykit builds and packages locally; it does not deploy. The
`environments`, `servers`, `scripts` and `deploy` sections of `deploy.yaml`
(hosts, ports, key files, start/stop commands, backups, health checks) are
read and written with the rest of the configuration, but no command uploads
artifacts, runs remote scripts, restarts services or rolls back releases.
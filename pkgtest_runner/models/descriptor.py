"""Descriptors for the individual items a test runner executes."""

import re
from collections.abc import Mapping
from pathlib import PurePath
from typing import Annotated, Literal

from pydantic import Field

from pkgtest_runner.models.base import Model

ModuleType = Literal["commonjs", "esm"]
PkgManager = Literal["npm", "pnpm", "yarn-v1", "yarn-berry", "bun"]
RunWith = Literal["node", "ts-node", "tsx", "bun", "deno"]

_WORD_RE = re.compile(r"[A-Z]{2,}(?=[A-Z][a-z]|\b|\d)|[A-Z]?[a-z]+|[A-Z]+|\d+")


def camel_case(value: str) -> str:
    """Collapse an alias like ``"my-alias 2"`` into ``"myAlias2"``."""
    words = _WORD_RE.findall(value)
    if not words:
        return ""
    head, *rest = words
    return head.lower() + "".join(word.capitalize() for word in rest)


class SuiteTarget(Model):
    """The environment variant that a runner's project was materialized for."""

    entry_alias: str = Field(..., description="Alias of the test config entry")
    mod_type: ModuleType = Field(..., description="Module format of the project")
    pkg_manager: PkgManager = Field(..., description="Package manager backend")
    pkg_manager_alias: str = Field(
        ..., description="Alias distinguishing configs of the same package manager"
    )

    def folder_path(self) -> PurePath:
        """Relative folder that identifies this variant (used for log scopes)."""
        return PurePath(
            camel_case(self.entry_alias),
            self.mod_type,
            self.pkg_manager,
            camel_case(self.pkg_manager_alias),
        )


class TestFile(Model):
    """A test file before and after it was copied into the test project."""

    __test__ = False

    orig: str = Field(..., description="Original file path relative to the source root")
    actual: str = Field(..., description="Path of the copied or compiled file to run")


class FileTest(TestFile):
    """A test file together with the command that runs it."""

    kind: Literal["file"] = "file"
    command: str = Field(..., description="The command that executes the file")


class BinTest(Model):
    """A single invocation of a package binary."""

    kind: Literal["bin"] = "bin"
    bin: str = Field(..., description="Binary name as exposed by the package")
    args: str = Field(default="", description="Arguments passed to the binary")
    env: Mapping[str, str] | None = Field(
        default=None, description="Environment overrides for this invocation"
    )


class ScriptTest(Model):
    """A named package script."""

    kind: Literal["script"] = "script"
    name: str = Field(..., description="Script name as declared by the package")


TestDescriptor = Annotated[FileTest | BinTest | ScriptTest, Field(discriminator="kind")]


class BinTestEntry(Model):
    """One configured invocation of a binary, before flattening."""

    args: str = Field(default="", description="Arguments passed to the binary")
    env: Mapping[str, str] | None = Field(
        default=None, description="Environment overrides for this invocation"
    )

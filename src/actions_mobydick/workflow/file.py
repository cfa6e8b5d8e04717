"""Load and render the workflow template that gets committed to every repository."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from jinja2 import Environment, StrictUndefined, TemplateError

from actions_mobydick.errors import WorkflowFileError

logger = logging.getLogger(__name__)

DEFAULT_WORKFLOWS_DIR = ".github/workflows"

# GitHub expressions like ${{ secrets.TOKEN }} must reach the repository untouched.
_GITHUB_EXPRESSION_OPEN = "${{"
_EXPRESSION_PLACEHOLDER = "@@MOBYDICK_GITHUB_EXPRESSION@@"


@dataclass(frozen=True, slots=True)
class WorkflowFile:
    """Rendered workflow content and its destination path inside a repository."""

    path: str
    content: bytes


def load_workflow_file(
    file: Path | str,
    version: str,
    *,
    workflows_dir: str = DEFAULT_WORKFLOWS_DIR,
) -> WorkflowFile:
    """Read ``file``, render it with ``version`` and target ``<workflows_dir>/<basename>``."""

    template_path = Path(file)
    try:
        source = template_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise WorkflowFileError(f"Cannot read workflow file {str(file)!r}: {error}") from error

    content = render_workflow(source, version=version, name=template_path.name)
    path = str(PurePosixPath(workflows_dir.strip("/") or ".") / template_path.name)
    logger.info("Rendered workflow file %s -> %s (version=%s)", template_path, path, version)
    return WorkflowFile(path=path, content=content.encode("utf-8"))


def render_workflow(source: str, *, version: str, name: str = "<template>") -> str:
    """Render template text, leaving GitHub ``${{ ... }}`` expressions as they are."""

    environment = Environment(
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    protected = source.replace(_GITHUB_EXPRESSION_OPEN, _EXPRESSION_PLACEHOLDER)
    try:
        rendered = environment.from_string(protected).render(version=version, Version=version)
    except TemplateError as error:
        raise WorkflowFileError(f"Cannot render workflow file {name!r}: {error}") from error
    return rendered.replace(_EXPRESSION_PLACEHOLDER, _GITHUB_EXPRESSION_OPEN)
